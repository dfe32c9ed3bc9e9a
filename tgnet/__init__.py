"""Transport resolution for the Telegram channel of the bot."""

__version__ = "0.3.0"
