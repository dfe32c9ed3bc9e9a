"""Configuration constants for Telegram network handling."""

# Override variables, current brand first; the first one present wins.
ENV_DISABLE_AUTO_SELECT_FAMILY = (
    "MOLTBOT_TELEGRAM_DISABLE_AUTO_SELECT_FAMILY",
    "CLAWDBOT_TELEGRAM_DISABLE_AUTO_SELECT_FAMILY",
)
ENV_ENABLE_AUTO_SELECT_FAMILY = (
    "MOLTBOT_TELEGRAM_ENABLE_AUTO_SELECT_FAMILY",
    "CLAWDBOT_TELEGRAM_ENABLE_AUTO_SELECT_FAMILY",
)
ENV_FORCE_IPV4 = (
    "MOLTBOT_TELEGRAM_FORCE_IPV4",
    "CLAWDBOT_TELEGRAM_FORCE_IPV4",
)
ENV_NO_FORCE_IPV4 = (
    "MOLTBOT_TELEGRAM_NO_FORCE_IPV4",
    "CLAWDBOT_TELEGRAM_NO_FORCE_IPV4",
)

# Platforms where IPv6 is commonly broken inside VM setups.
FORCE_IPV4_PLATFORMS = ("darwin",)

# Decision sources
SOURCE_ENV = "env"
SOURCE_CONFIG = "config"
SOURCE_DEFAULT = "default"

# Default HTTP behaviour
DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_RETRIES = 3

# Attempt delay before starting the next address family (RFC 8305 recommends 250ms)
CONNECTION_ATTEMPT_DELAY = 0.25

TRANSPORT_UNAVAILABLE_MESSAGE = "no HTTP transport available; set channels.telegram.proxy in config"
