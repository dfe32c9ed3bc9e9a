"""Configuration for Telegram network handling."""

from .network import ConfigError, TelegramChannelConfig, TelegramNetworkConfig, load_telegram_config

__all__ = ["ConfigError", "TelegramChannelConfig", "TelegramNetworkConfig", "load_telegram_config"]
