"""Tests for choosing the Telegram transport."""

import pytest

from tgnet.config import TelegramNetworkConfig
from tgnet.net import transport as transport_mod
from tgnet.net.ipv4 import IPV4_ADAPTER
from tgnet.net.state import NetworkState
from tgnet.net.transport import TransportResolver, TransportUnavailableError

URL = "https://api.telegram.org/bot123:abc/getMe"


@pytest.fixture
def toggle(recorder):
    return recorder()


@pytest.fixture
def default(recorder):
    return recorder(result="default-response")


def make_resolver(toggle, default, env=None, platform="linux"):
    return TransportResolver(
        state=NetworkState(probe=lambda: toggle),
        env=env or {},
        platform=platform,
        default=default,
    )


def test_default_transport_without_overrides(toggle, default):
    resolved = make_resolver(toggle, default).resolve()

    assert resolved(URL) == "default-response"
    assert "dispatcher" not in default.calls[0][1]
    assert toggle.calls == []


def test_force_ipv4_env_pins_every_call(toggle, default):
    resolved = make_resolver(toggle, default, env={"MOLTBOT_TELEGRAM_FORCE_IPV4": "1"}).resolve()

    resolved(URL)
    resolved(URL, method="POST", json={"text": "hi"})

    assert all(kwargs["dispatcher"] is IPV4_ADAPTER for _, kwargs in default.calls)


def test_no_force_env_beats_config(toggle, default):
    resolver = make_resolver(toggle, default, env={"MOLTBOT_TELEGRAM_NO_FORCE_IPV4": "1"})
    resolved = resolver.resolve(network=TelegramNetworkConfig(force_ipv4=True))

    resolved(URL, method="GET")

    assert "dispatcher" not in default.calls[0][1]


def test_macos_default_pins_ipv4(toggle, default):
    resolved = make_resolver(toggle, default, platform="darwin").resolve()
    resolved(URL)
    assert default.calls[0][1]["dispatcher"] is IPV4_ADAPTER


def test_explicit_transport_is_never_pinned(toggle, default, recorder):
    explicit = recorder(result="proxy-response")
    env = {"MOLTBOT_TELEGRAM_FORCE_IPV4": "1", "CLAWDBOT_TELEGRAM_ENABLE_AUTO_SELECT_FAMILY": "1"}
    resolved = make_resolver(toggle, default, env=env, platform="darwin").resolve(explicit)

    assert resolved(URL) == "proxy-response"
    assert "dispatcher" not in explicit.calls[0][1]
    assert default.calls == []
    assert toggle.calls == [((True,), {})]


def test_env_disable_beats_config_and_toggles_host(toggle, default):
    env = {"CLAWDBOT_TELEGRAM_DISABLE_AUTO_SELECT_FAMILY": "1"}
    resolver = make_resolver(toggle, default, env=env)
    resolver.resolve(network=TelegramNetworkConfig(auto_select_family=True))

    assert toggle.calls == [((False,), {})]
    assert resolver.state.applied is False


def test_config_enables_racing(toggle, default):
    make_resolver(toggle, default).resolve(network=TelegramNetworkConfig(auto_select_family=True))
    assert toggle.calls == [((True,), {})]


def test_racing_applied_once_across_resolutions(toggle, default):
    resolver = make_resolver(toggle, default, env={"MOLTBOT_TELEGRAM_DISABLE_AUTO_SELECT_FAMILY": "true"})
    resolver.resolve()
    resolver.resolve(network=TelegramNetworkConfig(auto_select_family=True))
    assert len(toggle.calls) == 1


def test_timeout_forwarded_through_wrappers(toggle, default):
    resolved = make_resolver(toggle, default, env={"MOLTBOT_TELEGRAM_FORCE_IPV4": "1"}).resolve()
    resolved(URL, timeout=(3.05, 27))
    assert default.calls[0][1]["timeout"] == (3.05, 27)


def test_missing_default_transport_raises(toggle):
    resolver = make_resolver(toggle, None, env={"MOLTBOT_TELEGRAM_DISABLE_AUTO_SELECT_FAMILY": "1"})

    with pytest.raises(TransportUnavailableError, match="channels.telegram.proxy"):
        resolver.resolve()
    # workaround still applied before failing
    assert toggle.calls == [((False,), {})]


def test_missing_default_is_fine_with_explicit_transport(toggle, recorder):
    explicit = recorder(result="ok")
    resolved = make_resolver(toggle, None).resolve(explicit)
    assert resolved(URL) == "ok"


def test_module_level_resolver(monkeypatch, toggle, default):
    monkeypatch.setattr(transport_mod, "_resolver", make_resolver(toggle, default))
    resolved = transport_mod.resolve_telegram_transport(network=TelegramNetworkConfig(force_ipv4=True))
    resolved(URL)
    assert default.calls[0][1]["dispatcher"] is IPV4_ADAPTER
