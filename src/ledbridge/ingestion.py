"""Inbound payload decoding.

Translates raw MQTT messages into typed models. Nothing here touches the
cache or the store.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ledbridge._constants import PROTOCOL_MQTT
from ledbridge.exceptions import LedBridgeDecodeError
from ledbridge.models.led import Led, LedConf, LedSetup

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def parse_json_object(payload: bytes | str) -> dict[str, Any]:
    """Parse *payload* as a JSON object."""
    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        parsed = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise LedBridgeDecodeError(f"Payload is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise LedBridgeDecodeError("Payload is not a JSON object")
    return parsed


def _validate(model: type[_ModelT], payload: bytes | str) -> _ModelT:
    data = parse_json_object(payload)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise LedBridgeDecodeError(f"Invalid {model.__name__} payload: {exc}") from exc


def device_topic_from(topic: str) -> str:
    """Derive the driver's own topic from an inbound topic.

    ``/read/led/AA11/status/dump`` -> ``led/AA11``
    """
    segments = topic.split("/")
    if len(segments) < 4 or not segments[2] or not segments[3]:
        raise LedBridgeDecodeError(f"Cannot derive driver topic from {topic!r}")
    return f"{segments[2]}/{segments[3]}"


def _driver_report(payload: bytes | str) -> Led:
    led = _validate(Led, payload)
    if not led.mac.strip():
        raise LedBridgeDecodeError("Driver report without mac")
    return led


def driver_hello(topic: str, payload: bytes | str, switch_mac: str) -> Led:
    """Decode a hello announcement. A driver saying hello is not configured yet."""
    led = _driver_report(payload)
    return led.model_copy(
        update={
            "is_configured": False,
            "protocol": PROTOCOL_MQTT,
            "switch_mac": switch_mac,
            "topic": device_topic_from(topic),
        }
    )


def driver_status(topic: str, payload: bytes | str, switch_mac: str) -> Led:
    """Decode a periodic status dump."""
    led = _driver_report(payload)
    return led.model_copy(
        update={
            "protocol": PROTOCOL_MQTT,
            "switch_mac": switch_mac,
            "topic": device_topic_from(topic),
        }
    )


def setup_request(payload: bytes | str) -> LedSetup:
    return _validate(LedSetup, payload)


def config_update(payload: bytes | str) -> LedConf:
    return _validate(LedConf, payload)
