"""Internal MQTT runtime for the driver broker."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from ledbridge.exceptions import LedBridgeTransportError


@dataclass(frozen=True)
class MqttMessage:
    """Inbound message as handed to the service."""

    topic: str
    payload: bytes

    def matches(self, pattern: str) -> bool:
        return bool(mqtt.topic_matches_sub(pattern, self.topic))


class LedMqttRuntime:
    """Threaded paho-mqtt runtime.

    Inbound messages are handed to ``on_message`` on the paho network
    thread; the callback is expected to return quickly. Patterns
    registered with :meth:`subscribe` are re-subscribed on every connect.
    """

    def __init__(
        self,
        *,
        client_id: str,
        on_message: Callable[[MqttMessage], None],
        keepalive: int = 60,
        qos: int = 1,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client_id = client_id
        self._on_message = on_message
        self._keepalive = keepalive
        self._qos = qos
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._patterns: list[str] = []
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    @property
    def patterns(self) -> list[str]:
        with self._lock:
            return list(self._patterns)

    def subscribe(self, pattern: str) -> None:
        """Register *pattern*; subscribes immediately when already connected."""
        with self._lock:
            if pattern in self._patterns:
                return
            self._patterns.append(pattern)
            client = self._client
        if client is not None and client.is_connected():
            self._logger.debug("MQTT subscribing topic=%s", pattern)
            client.subscribe(pattern, qos=self._qos)

    def _dispatch(self, topic: str, payload: bytes) -> None:
        try:
            self._on_message(MqttMessage(topic=topic, payload=payload))
        except Exception:
            self._logger.error("MQTT message handler failed topic=%s", topic, exc_info=True)

    def start(self, host: str, port: int) -> None:
        """Connect to the broker and start the network loop."""
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s client_id=%s",
            host,
            port,
            self._client_id,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(self._logger)

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.info("%s connected to drivers broker %s:%s", self._client_id, host, port)
            for pattern in self.patterns:
                self._logger.debug("MQTT subscribing topic=%s", pattern)
                c.subscribe(pattern, qos=self._qos)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self._dispatch(msg.topic, msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.warning("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(host, port, keepalive=self._keepalive)
        except OSError as exc:
            raise LedBridgeTransportError(f"Cannot connect to broker {host}:{port}: {exc}") from exc
        client.loop_start()

        with self._lock:
            self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        with self._lock:
            client = self._client
            self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def send_command(self, topic: str, payload: str) -> None:
        """Publish *payload* on *topic*. Fire-and-forget: no delivery tracking."""
        client = self._client
        if client is None or not self._running:
            raise LedBridgeTransportError("MQTT runtime is not running", topic=topic)
        info = client.publish(topic, payload, qos=self._qos)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise LedBridgeTransportError(
                f"Publish failed: {mqtt.error_string(info.rc)}",
                topic=topic,
            )
