"""Service configuration for ledbridge."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import socket
import uuid
from pathlib import Path
from typing import Any

from ledbridge._constants import TABLE_NAME
from ledbridge.exceptions import LedBridgeConfigError

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def normalize_mac(value: str) -> str:
    """Upper-case *value* and strip ``:``/``-`` separators."""
    return value.strip().upper().replace(":", "").replace("-", "")


def host_mac() -> str:
    """MAC address of this host in normalized form."""
    return f"{uuid.getnode():012X}"


def _default_client_id() -> str:
    return f"LED{socket.gethostname()}"


@dataclasses.dataclass(frozen=True)
class BridgeConfig:
    """Service configuration.

    Parameters
    ----------
    switch_mac : str
        Address of this controller, used to scope stored records and the
        request topics. Defaults to the host MAC address.
    broker_host : str
        Host of the drivers' MQTT broker.
    broker_port : int
        Port of the drivers' MQTT broker.
    client_id : str
        MQTT client identifier. Defaults to ``LED<hostname>``.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    command_qos : int
        QoS for subscriptions and outbound commands (0, 1 or 2).
    database_path : str
        SQLite file holding driver records; ``":memory:"`` keeps records in
        process memory only.
    table_name : str
        Record table for drivers.
    worker_count : int
        Size of the worker pool handling inbound messages.
    log_level : str
        Root logging level name.
    """

    switch_mac: str = dataclasses.field(default_factory=host_mac)
    broker_host: str = "127.0.0.1"
    broker_port: int = 1883
    client_id: str = dataclasses.field(default_factory=_default_client_id)
    mqtt_keepalive: int = 60
    command_qos: int = 1
    database_path: str = "ledbridge.db"
    table_name: str = TABLE_NAME
    worker_count: int = 4
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "switch_mac", normalize_mac(self.switch_mac))
        object.__setattr__(self, "log_level", self.log_level.strip().upper())
        if not self.switch_mac:
            raise LedBridgeConfigError("switch_mac must be non-empty")
        if not 0 < self.broker_port < 65536:
            raise LedBridgeConfigError(f"broker_port out of range: {self.broker_port}")
        if self.command_qos not in (0, 1, 2):
            raise LedBridgeConfigError(f"command_qos must be 0, 1 or 2: {self.command_qos}")
        if self.worker_count < 1:
            raise LedBridgeConfigError(f"worker_count must be positive: {self.worker_count}")
        if self.log_level not in _LOG_LEVELS:
            raise LedBridgeConfigError(f"Unknown log level: {self.log_level}")

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def _build(cls, values: dict[str, Any]) -> BridgeConfig:
        try:
            return cls(**values)
        except (TypeError, ValueError) as exc:
            raise LedBridgeConfigError(str(exc)) from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> BridgeConfig:
        """Create configuration from ``LEDBRIDGE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(cls):
            val = env.get(f"LEDBRIDGE_{field.name.upper()}")
            if val is not None:
                config_kwargs[field.name] = _coerce(field.name, val)
        config_kwargs.update(overrides)
        return cls._build(config_kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **overrides: Any) -> BridgeConfig:
        """Create configuration from a JSON file with camelCase keys.

        Example::

            {"brokerHost": "10.0.0.2", "brokerPort": 1883, "logLevel": "DEBUG"}
        """
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise LedBridgeConfigError(f"Cannot parse configuration file {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise LedBridgeConfigError(f"Configuration file {path} is not a JSON object")

        by_key = {_camel(field.name): field.name for field in dataclasses.fields(cls)}
        config_kwargs: dict[str, Any] = {}
        for key, value in raw.items():
            name = by_key.get(key)
            if name is None:
                raise LedBridgeConfigError(f"Unknown configuration key {key!r} in {path}")
            config_kwargs[name] = _coerce(name, value)
        config_kwargs.update(overrides)
        return cls._build(config_kwargs)


_INT_FIELDS = frozenset({"broker_port", "mqtt_keepalive", "command_qos", "worker_count"})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _coerce(name: str, value: Any) -> Any:
    if name in _INT_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise LedBridgeConfigError(f"{name} must be an integer, got {value!r}") from exc
    return str(value)
