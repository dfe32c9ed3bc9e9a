"""Resolve the Telegram network overrides from env, config and platform."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from tgnet.config.constants import (
    ENV_DISABLE_AUTO_SELECT_FAMILY,
    ENV_ENABLE_AUTO_SELECT_FAMILY,
    ENV_FORCE_IPV4,
    ENV_NO_FORCE_IPV4,
    FORCE_IPV4_PLATFORMS,
    SOURCE_CONFIG,
    SOURCE_DEFAULT,
    SOURCE_ENV,
)
from tgnet.config.network import TelegramNetworkConfig
from tgnet.utils import env_flag


@dataclass(frozen=True)
class Decision:
    value: Optional[bool] = None
    source: Optional[str] = None


def _lookup(env: Mapping[str, str], names: Sequence[str]) -> Optional[str]:
    # First alias present wins, even when its value is falsy.
    for name in names:
        value = env.get(name)
        if value is not None:
            return value
    return None


def resolve_auto_select_family(
    network: Optional[TelegramNetworkConfig] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Decision:
    """Decide whether dual-stack connection racing should be on, off or left alone.

    Precedence: enable env override, disable env override, ``network.auto_select_family``.
    A ``Decision`` with ``value=None`` means no opinion.
    """
    e = os.environ if env is None else env
    if env_flag(_lookup(e, ENV_ENABLE_AUTO_SELECT_FAMILY)):
        return Decision(True, SOURCE_ENV)
    if env_flag(_lookup(e, ENV_DISABLE_AUTO_SELECT_FAMILY)):
        return Decision(False, SOURCE_ENV)
    if network is not None and isinstance(network.auto_select_family, bool):
        return Decision(network.auto_select_family, SOURCE_CONFIG)
    return Decision()


def resolve_force_ipv4(
    network: Optional[TelegramNetworkConfig] = None,
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Decision:
    """Decide whether the default transport should be pinned to IPv4.

    Always yields a value: when neither env nor config has an opinion the
    platform default applies (on for macOS, where IPv6 is often broken in VMs).
    """
    e = os.environ if env is None else env
    if env_flag(_lookup(e, ENV_FORCE_IPV4)):
        return Decision(True, SOURCE_ENV)
    if env_flag(_lookup(e, ENV_NO_FORCE_IPV4)):
        return Decision(False, SOURCE_ENV)
    if network is not None and isinstance(network.force_ipv4, bool):
        return Decision(network.force_ipv4, SOURCE_CONFIG)
    host = sys.platform if platform is None else platform
    return Decision(host in FORCE_IPV4_PLATFORMS, SOURCE_DEFAULT)
