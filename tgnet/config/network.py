"""Structured Telegram channel configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator, validate
from jsonschema.exceptions import ValidationError

from tgnet.config.constants import DEFAULT_RETRIES, DEFAULT_TIMEOUT_SEC

TELEGRAM_SCHEMA = {
    "type": "object",
    "properties": {
        "proxy": {"type": ["string", "null"]},
        "timeout_sec": {"type": "number", "exclusiveMinimum": 0},
        "retries": {"type": "integer", "minimum": 0},
        "network": {
            "type": ["object", "null"],
            "properties": {
                "autoSelectFamily": {"type": ["boolean", "null"]},
                "forceIpv4": {"type": ["boolean", "null"]},
            },
            "additionalProperties": False,
        },
    },
}


class ConfigError(ValueError):
    """Raised when the Telegram channel configuration is invalid."""


def _validate(section: Mapping[str, Any]) -> None:
    try:
        validate(instance=section, schema=TELEGRAM_SCHEMA, cls=Draft202012Validator)
    except ValidationError as e:
        raise ConfigError(f"Config validation error: {e.message} at {list(e.path)}") from e


@dataclass(frozen=True)
class TelegramNetworkConfig:
    """Tri-state network overrides; ``None`` defers to lower-precedence sources."""

    auto_select_family: Optional[bool] = None
    force_ipv4: Optional[bool] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "TelegramNetworkConfig":
        if not data:
            return cls()
        _validate({"network": dict(data)})
        return cls(
            auto_select_family=data.get("autoSelectFamily"),
            force_ipv4=data.get("forceIpv4"),
        )


@dataclass(frozen=True)
class TelegramChannelConfig:
    proxy: Optional[str] = None
    network: TelegramNetworkConfig = field(default_factory=TelegramNetworkConfig)
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    retries: int = DEFAULT_RETRIES

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "TelegramChannelConfig":
        section = dict(data or {})
        _validate(section)
        return cls(
            proxy=section.get("proxy") or None,
            network=TelegramNetworkConfig.from_mapping(section.get("network")),
            timeout_sec=float(section.get("timeout_sec", DEFAULT_TIMEOUT_SEC)),
            retries=int(section.get("retries", DEFAULT_RETRIES)),
        )

    def build_transport(self):
        """Resolve the transport for this channel, routing through ``proxy`` when set."""
        from tgnet.net import proxy_transport, resolve_telegram_transport, with_default_timeout

        explicit = proxy_transport(self.proxy, retries=self.retries) if self.proxy else None
        return with_default_timeout(resolve_telegram_transport(explicit, network=self.network), self.timeout_sec)


def load_telegram_config(path) -> TelegramChannelConfig:
    """Read ``channels.telegram`` from a YAML config file."""
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError("Config validation error: top level must be a mapping at []")
    channels = raw.get("channels") or {}
    if not isinstance(channels, dict):
        raise ConfigError("Config validation error: channels must be a mapping at ['channels']")
    return TelegramChannelConfig.from_mapping(channels.get("telegram"))
