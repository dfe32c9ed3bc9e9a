"""Pick the transport used for Telegram Bot API calls."""

from __future__ import annotations

from typing import Mapping, Optional

from tgnet.config.constants import TRANSPORT_UNAVAILABLE_MESSAGE
from tgnet.config.network import TelegramNetworkConfig
from tgnet.net.decisions import resolve_auto_select_family, resolve_force_ipv4
from tgnet.net.http import Transport, default_transport, normalize_transport
from tgnet.net.ipv4 import force_ipv4_transport
from tgnet.net.state import NetworkState
from tgnet.utils import get_logger

logger = get_logger("tgnet.telegram.network")


class TransportUnavailableError(RuntimeError):
    """No explicit transport was given and the host has no default one."""

    def __init__(self, message: str = TRANSPORT_UNAVAILABLE_MESSAGE):
        super().__init__(message)


class TransportResolver:
    def __init__(
        self,
        state: Optional[NetworkState] = None,
        env: Optional[Mapping[str, str]] = None,
        platform: Optional[str] = None,
        default: Optional[Transport] = default_transport,
    ):
        self.state = state or NetworkState()
        self.env = env
        self.platform = platform
        self.default = default

    def resolve(
        self,
        explicit: Optional[Transport] = None,
        network: Optional[TelegramNetworkConfig] = None,
    ) -> Transport:
        """Return the transport to use, applying the racing workaround first.

        An explicit transport (usually the proxy one) is returned as is: its
        owner decides how it connects, so IPv4 pinning is never layered on it.
        """
        self.state.apply_auto_select_family(resolve_auto_select_family(network, self.env))
        if explicit is not None:
            return normalize_transport(explicit)

        if self.default is None:
            raise TransportUnavailableError()
        decision = resolve_force_ipv4(network, self.env, self.platform)
        logger.debug("forceIpv4=%s (%s)", str(decision.value).lower(), decision.source)
        if decision.value:
            return normalize_transport(force_ipv4_transport(self.default))
        return normalize_transport(self.default)


_resolver = TransportResolver()


def resolve_telegram_transport(
    proxy_transport: Optional[Transport] = None,
    network: Optional[TelegramNetworkConfig] = None,
) -> Transport:
    """Resolve with the process-wide network state, ``os.environ`` and ``sys.platform``."""
    return _resolver.resolve(proxy_transport, network)
