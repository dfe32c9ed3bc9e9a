import os
import re
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler

# ---------- Env helpers ----------

def env_flag(raw) -> bool:
    """Truthiness shared by every override variable: anything but unset, "0" or "false"."""
    if not raw:
        return False
    return raw != "0" and raw.lower() != "false"

# ---------- Logging ----------

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = os.getenv("LOG_DIR")
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if json_mode:
        fmt = JsonFormatter()
    else:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logger.level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(os.path.join(log_dir, "tgnet.log"), when="D", backupCount=7, encoding="utf-8")
        fh.setLevel(logger.level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)

# ---------- Secret redaction ----------

def redact_secrets(s: str) -> str:
    """Redact bot tokens and proxy credentials from strings for safe logging."""
    if not s:
        return s

    redacted = s
    token = os.getenv("TELEGRAM_BOT_TOKEN")
    if token and len(token) > 3:
        redacted = redacted.replace(token, "***")

    redacted = re.sub(r"/bot\d+:[A-Za-z0-9_-]+", "/bot***", redacted)
    redacted = re.sub(r"://[^/@:\s]+:[^/@\s]+@", "://***:***@", redacted)
    return redacted
