"""Process-wide network state for the Telegram channel."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from tgnet.net.decisions import Decision
from tgnet.net.happy_eyeballs import probe_auto_select_family
from tgnet.utils import get_logger

logger = get_logger("tgnet.telegram.network")


class NetworkState:
    """Tracks the connection-racing value applied to the host.

    The toggle is looked up through ``probe`` on every attempt; a probe that
    returns ``None`` means the host cannot change the behaviour, which is a
    normal condition.
    """

    def __init__(
        self,
        probe: Callable[[], Optional[Callable[[bool], None]]] = probe_auto_select_family,
        log: Optional[logging.Logger] = None,
    ):
        self.probe = probe
        self.log = log or logger
        self.applied: Optional[bool] = None

    def apply_auto_select_family(self, decision: Decision) -> bool:
        if decision.value is None or decision.value == self.applied:
            return False

        setter = self.probe()
        if setter is None:
            self.log.debug("autoSelectFamily toggle unsupported by host; leaving default")
            return False
        try:
            setter(decision.value)
        except Exception as exc:
            self.log.debug("autoSelectFamily toggle failed: %s", exc)
            return False

        self.applied = decision.value
        label = f" ({decision.source})" if decision.source else ""
        self.log.info("autoSelectFamily=%s%s", str(decision.value).lower(), label)
        return True

    def reset(self) -> None:
        self.applied = None
