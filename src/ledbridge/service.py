"""LED service: wires the driver broker to the reconciler and the dispatcher."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from ledbridge import ingestion
from ledbridge._constants import hello_pattern, setup_request_topic, status_pattern, update_request_topic
from ledbridge._mqtt import LedMqttRuntime, MqttMessage
from ledbridge.config import BridgeConfig
from ledbridge.dispatcher import CommandDispatcher
from ledbridge.exceptions import LedBridgeDecodeError, LedBridgeStoreError
from ledbridge.state.cache import DeviceCache
from ledbridge.state.reconciler import Reconciler, ReconcileResult
from ledbridge.store import InMemoryRecordStore, RecordStore, SqliteRecordStore
from ledbridge.store.sqlite import MEMORY_PATH

_logger = logging.getLogger(__name__)

Handler = Callable[[MqttMessage], None]


class Transport(Protocol):
    def subscribe(self, pattern: str) -> None: ...

    def start(self, host: str, port: int) -> None: ...

    def stop(self) -> None: ...

    def send_command(self, topic: str, payload: str) -> None: ...


def open_store(config: BridgeConfig) -> RecordStore:
    if config.database_path == MEMORY_PATH:
        return InMemoryRecordStore()
    return SqliteRecordStore(config.database_path)


class LedService:
    """Synchronizes LED drivers with the record store and relays their commands.

    Usage::

        service = LedService(BridgeConfig.from_env())
        service.start()
        service.run()  # until stop() or a signal

    Every inbound message runs on a bounded worker pool. Handlers never
    raise: failures are logged and the message is dropped.
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        store: RecordStore | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._store = store if store is not None else open_store(config)
        self._transport: Transport = transport or LedMqttRuntime(
            client_id=config.client_id,
            on_message=self.submit,
            keepalive=config.mqtt_keepalive,
            qos=config.command_qos,
        )
        self._cache = DeviceCache()
        self._reconciler = Reconciler(self._cache, self._store, config.switch_mac, table=config.table_name)
        self._dispatcher = CommandDispatcher(self._reconciler, self._transport)
        self._executor: ThreadPoolExecutor | None = None
        self._stopped = threading.Event()
        self._routes: list[tuple[str, Handler]] = [
            (hello_pattern(), self.on_driver_hello),
            (status_pattern(), self.on_driver_status),
            (setup_request_topic(config.switch_mac), self.on_setup),
            (update_request_topic(config.switch_mac), self.on_update),
        ]

    @property
    def config(self) -> BridgeConfig:
        return self._config

    @property
    def reconciler(self) -> Reconciler:
        return self._reconciler

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        _logger.info("Starting LED service switch=%s", self._config.switch_mac)
        try:
            self._store.create_table(self._config.table_name)
        except LedBridgeStoreError as exc:
            _logger.warning("Create table %s: %s", self._config.table_name, exc)

        self._stopped.clear()
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.worker_count,
            thread_name_prefix="ledbridge",
        )
        for pattern, _handler in self._routes:
            self._transport.subscribe(pattern)
        self._transport.start(self._config.broker_host, self._config.broker_port)
        _logger.info("LED service started")

    def stop(self) -> None:
        _logger.info("Stopping LED service")
        self._transport.stop()
        executor = self._executor
        self._executor = None
        if executor is not None:
            executor.shutdown(wait=True)
        self._store.close()
        self._stopped.set()
        _logger.info("LED service stopped")

    def run(self) -> None:
        """Block until :meth:`stop` is called."""
        self._stopped.wait()

    # ------------------------------------------------------------------
    # Inbound dispatch
    # ------------------------------------------------------------------

    def route(self, message: MqttMessage) -> Handler | None:
        for pattern, handler in self._routes:
            if message.matches(pattern):
                return handler
        return None

    def submit(self, message: MqttMessage) -> None:
        """Hand *message* to the worker pool. Called on the transport thread."""
        handler = self.route(message)
        if handler is None:
            _logger.debug("No handler for topic %s", message.topic)
            return
        executor = self._executor
        if executor is None:
            _logger.warning("Dropping message on %s: service not started", message.topic)
            return
        executor.submit(self._run_handler, handler, message)

    @staticmethod
    def _run_handler(handler: Handler, message: MqttMessage) -> None:
        try:
            handler(message)
        except Exception:
            _logger.exception("Handler failed for topic %s", message.topic)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_driver_hello(self, message: MqttMessage) -> None:
        _logger.debug("LED service: Received hello topic: %s payload: %r", message.topic, message.payload)
        try:
            led = ingestion.driver_hello(message.topic, message.payload, self._config.switch_mac)
        except LedBridgeDecodeError as exc:
            _logger.error("Error during parsing: %s", exc)
            return
        try:
            result = self._reconciler.reconcile(led)
        except LedBridgeStoreError as exc:
            _logger.error("Error during database update: %s", exc)
            return
        if result is not ReconcileResult.UNCHANGED:
            _logger.info("New LED driver %s stored on database", led.mac)

    def on_driver_status(self, message: MqttMessage) -> None:
        _logger.debug("LED service driver status: Received topic: %s payload: %r", message.topic, message.payload)
        try:
            led = ingestion.driver_status(message.topic, message.payload, self._config.switch_mac)
        except LedBridgeDecodeError as exc:
            _logger.error("Error during parsing: %s", exc)
            return
        try:
            result = self._reconciler.reconcile(led)
        except LedBridgeStoreError as exc:
            _logger.error("Error during database update: %s", exc)
            return
        if result is not ReconcileResult.UNCHANGED:
            _logger.debug("Driver %s status %s", led.mac, result.value)

    def on_setup(self, message: MqttMessage) -> None:
        _logger.debug("LED service onSetup: Received topic: %s payload: %r", message.topic, message.payload)
        try:
            setup = ingestion.setup_request(message.payload)
        except LedBridgeDecodeError as exc:
            _logger.error("Error during parsing: %s", exc)
            return
        self._dispatcher.send_setup(setup)

    def on_update(self, message: MqttMessage) -> None:
        _logger.debug("LED service update settings: Received topic: %s payload: %r", message.topic, message.payload)
        try:
            conf = ingestion.config_update(message.payload)
        except LedBridgeDecodeError as exc:
            _logger.error("Error during parsing: %s", exc)
            return
        self._dispatcher.send_update(conf)
