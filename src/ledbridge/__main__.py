"""Command-line entry point: ``python -m ledbridge``."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Any

from ledbridge.config import BridgeConfig
from ledbridge.exceptions import LedBridgeConfigError, LedBridgeError
from ledbridge.service import LedService

_logger = logging.getLogger("ledbridge")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledbridge",
        description="Synchronize LED drivers with the record store and relay their commands.",
    )
    parser.add_argument("--config", help="JSON configuration file (camelCase keys)")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--broker-host", help="Drivers MQTT broker host")
    parser.add_argument("--broker-port", type=int, help="Drivers MQTT broker port")
    parser.add_argument("--database", help="SQLite database path, or :memory:")
    parser.add_argument("--switch-mac", help="Address of this controller")
    return parser


def load_config(args: argparse.Namespace) -> BridgeConfig:
    overrides: dict[str, Any] = {}
    for attr, field_name in (
        ("log_level", "log_level"),
        ("broker_host", "broker_host"),
        ("broker_port", "broker_port"),
        ("database", "database_path"),
        ("switch_mac", "switch_mac"),
    ):
        value = getattr(args, attr)
        if value is not None:
            overrides[field_name] = value
    if args.config:
        return BridgeConfig.from_file(args.config, **overrides)
    return BridgeConfig.from_env(**overrides)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except LedBridgeConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level_value,
        format="%(levelname)s %(name)s: %(message)s",
    )

    service = LedService(config)

    def _handle_signal(signum: int, _frame: Any) -> None:
        _logger.info("Received signal %s", signal.Signals(signum).name)
        service.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        service.start()
    except LedBridgeError as exc:
        _logger.error("Cannot start LED service: %s", exc)
        service.stop()
        return 1
    service.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
