"""Networking utilities for Telegram Bot API access."""

from .decisions import Decision, resolve_auto_select_family, resolve_force_ipv4
from .http import SessionTransport, default_transport, normalize_transport, proxy_transport, retry_session, with_default_timeout
from .ipv4 import IPV4_ADAPTER, IPv4Adapter, force_ipv4_transport
from .state import NetworkState
from .transport import TransportResolver, TransportUnavailableError, resolve_telegram_transport

__all__ = [
    "Decision",
    "IPV4_ADAPTER",
    "IPv4Adapter",
    "NetworkState",
    "SessionTransport",
    "TransportResolver",
    "TransportUnavailableError",
    "default_transport",
    "force_ipv4_transport",
    "normalize_transport",
    "proxy_transport",
    "resolve_auto_select_family",
    "resolve_force_ipv4",
    "resolve_telegram_transport",
    "retry_session",
    "with_default_timeout",
]
