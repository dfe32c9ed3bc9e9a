#!/usr/bin/env python3
import argparse
import json
import sys

from tgnet.config import ConfigError, TelegramChannelConfig, load_telegram_config
from tgnet.net.decisions import resolve_auto_select_family, resolve_force_ipv4
from tgnet.net.happy_eyeballs import get_default_auto_select_family, probe_auto_select_family
from tgnet.net.state import NetworkState
from tgnet.utils import redact_secrets


def collect_report(channel: TelegramChannelConfig, env=None, platform=None, apply=False, state=None) -> dict:
    racing = resolve_auto_select_family(channel.network, env)
    ipv4 = resolve_force_ipv4(channel.network, env, platform)
    report = {
        "autoSelectFamily": {"value": racing.value, "source": racing.source},
        "forceIpv4": {"value": ipv4.value, "source": ipv4.source},
        "proxy": redact_secrets(channel.proxy) if channel.proxy else None,
        "hostToggleSupported": probe_auto_select_family() is not None,
    }
    if apply:
        report["applied"] = (state or NetworkState()).apply_auto_select_family(racing)
    report["racingActive"] = get_default_auto_select_family()
    return report


def main(argv=None):
    parser = argparse.ArgumentParser(description="Show how Telegram requests will connect")
    parser.add_argument("--config", help="Path to YAML config (reads channels.telegram)")
    parser.add_argument("--apply", action="store_true", help="Apply the autoSelectFamily decision before reporting")
    args = parser.parse_args(argv)

    try:
        channel = load_telegram_config(args.config) if args.config else TelegramChannelConfig()
    except ConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    print(json.dumps(collect_report(channel, apply=args.apply), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
