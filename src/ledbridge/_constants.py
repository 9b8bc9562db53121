"""Topic layout and table constants shared by the LED drivers and the bridge."""

from __future__ import annotations

TABLE_NAME = "leds"

URL_HELLO = "setup/hello"
URL_STATUS = "status/dump"
URL_SETUP = "setup/config"
URL_SETTING = "update/settings"

READ_PREFIX = "/read"
WRITE_PREFIX = "/write"

PROTOCOL_MQTT = "MQTT"

CMD_SETUP = "setup"
CMD_UPDATE = "update"

# Store criteria keys, using the record's wire names.
CRITERIA_MAC = "mac"
CRITERIA_SWITCH_MAC = "switchMac"


def hello_pattern() -> str:
    return f"{READ_PREFIX}/led/+/{URL_HELLO}"


def status_pattern() -> str:
    return f"{READ_PREFIX}/led/+/{URL_STATUS}"


def setup_request_topic(switch_mac: str) -> str:
    return f"{WRITE_PREFIX}/switch/{switch_mac}/led/{URL_SETUP}"


def update_request_topic(switch_mac: str) -> str:
    return f"{WRITE_PREFIX}/switch/{switch_mac}/led/{URL_SETTING}"
