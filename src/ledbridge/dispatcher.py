"""Relay setup and settings requests to the driver's own topic."""

from __future__ import annotations

import logging
from typing import Protocol

from ledbridge._constants import URL_SETTING, URL_SETUP, WRITE_PREFIX
from ledbridge.exceptions import LedBridgeDecodeError, LedBridgeStoreError, LedBridgeTransportError
from ledbridge.models.led import Led, LedConf, LedSetup, SetupCommand, UpdateCommand
from ledbridge.state.reconciler import Reconciler

_logger = logging.getLogger(__name__)


class CommandSender(Protocol):
    def send_command(self, topic: str, payload: str) -> None:
        """Publish *payload* on *topic*; raise ``LedBridgeTransportError`` on failure."""


class CommandDispatcher:
    """Resolve a driver's topic and send it a command envelope.

    Requests for drivers that cannot be resolved are dropped with a
    warning. Send failures are logged and not retried.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        sender: CommandSender,
        *,
        write_prefix: str = WRITE_PREFIX,
    ) -> None:
        self._reconciler = reconciler
        self._sender = sender
        self._write_prefix = write_prefix.rstrip("/")

    def resolve_topic(self, mac: str) -> str | None:
        cached = self._reconciler.cache.get(mac)
        if cached is not None:
            return cached.topic or None
        try:
            record = self._reconciler.lookup_record(mac)
        except LedBridgeStoreError as exc:
            _logger.warning("Lookup of driver %s failed: %s", mac, exc)
            return None
        if record is None:
            return None
        try:
            stored = Led.from_record(record)
        except LedBridgeDecodeError as exc:
            _logger.warning("Stored record of driver %s is invalid: %s", mac, exc)
            return None
        return stored.topic or None

    def command_topic(self, topic: str, url: str) -> str:
        return f"{self._write_prefix}/{topic.strip('/')}/{url}"

    def _send(self, mac: str, url: str, dump: str) -> bool:
        topic = self.resolve_topic(mac)
        if topic is None:
            _logger.warning("Cannot find driver %s", mac)
            return False
        destination = self.command_topic(topic, url)
        try:
            self._sender.send_command(destination, dump)
        except LedBridgeTransportError as exc:
            _logger.error("Cannot send command to driver %s on %s: %s", mac, destination, exc)
            return False
        _logger.info("Command sent to %s on topic %s: %s", mac, destination, dump)
        return True

    def send_setup(self, setup: LedSetup) -> bool:
        """Send the initial configuration to the driver; ``True`` when published."""
        command = SetupCommand.from_request(setup)
        return self._send(setup.mac, URL_SETUP, command.to_json())

    def send_update(self, conf: LedConf) -> bool:
        """Send new settings to the driver; ``True`` when published."""
        command = UpdateCommand.from_request(conf)
        return self._send(conf.mac, URL_SETTING, command.to_json())
