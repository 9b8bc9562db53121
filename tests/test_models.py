"""Tests for pydantic model parsing with LedBaseModel."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from ledbridge.exceptions import LedBridgeDecodeError
from ledbridge.models.led import Led, LedConf, LedSetup, RecordIdentity, SetupCommand, UpdateCommand

# ------------------------------------------------------------------
# Led
# ------------------------------------------------------------------


class TestLed:
    SAMPLE_PAYLOAD: dict = {
        "mac": "AA:BB:CC:DD:EE:FF",
        "ip": "10.0.0.12",
        "group": 2,
        "isConfigured": True,
        "softwareVersion": 1.2,
        "hardwareVersion": "rev-b",
        "isBleEnabled": True,
        "temperature": 21,
        "iMax": 700,
        "thresoldLow": 10,
        "thresoldHigh": 90,
        "daisyChainEnabled": False,
        "energy": 1532.5,
        "voltageLed": 48,
        "friendlyName": "desk",
    }

    def test_camel_case_keys_map_to_fields(self) -> None:
        led = Led.model_validate(self.SAMPLE_PAYLOAD)
        assert led.mac == "AA:BB:CC:DD:EE:FF"
        assert led.is_configured is True
        assert led.software_version == pytest.approx(1.2)
        assert led.i_max == 700
        assert led.thresold_low == 10
        assert led.voltage_led == 48
        assert led.friendly_name == "desk"

    def test_missing_and_null_fields_use_defaults(self) -> None:
        led = Led.model_validate({"mac": "AA", "temperature": None, "topic": None})
        assert led.temperature == 0
        assert led.topic == ""
        assert led.id is None

    def test_unknown_keys_are_ignored(self) -> None:
        led = Led.model_validate({"mac": "AA", "firmwareChannel": "beta"})
        assert led.mac == "AA"

    def test_equality_covers_every_field(self) -> None:
        a = Led.model_validate(self.SAMPLE_PAYLOAD)
        b = Led.model_validate(self.SAMPLE_PAYLOAD)
        assert a == b
        assert a != b.model_copy(update={"temperature": 45})
        assert a != b.with_identity("x")

    def test_models_are_frozen(self) -> None:
        led = Led(mac="AA")
        with pytest.raises(ValidationError):
            led.temperature = 3  # type: ignore[misc]

    def test_to_record_uses_wire_names_without_identity(self) -> None:
        record = Led.model_validate(self.SAMPLE_PAYLOAD).with_identity("42").to_record()
        assert record["switchMac"] == ""
        assert record["isBleEnabled"] is True
        assert record["thresoldHigh"] == 90
        assert "ID" not in record
        assert "id" not in record

    def test_identity_wire_name(self) -> None:
        led = Led.model_validate({"ID": "abc", "mac": "AA"})
        assert led.id == "abc"
        assert json.loads(led.to_json())["ID"] == "abc"


class TestFromRecord:
    def test_lower_case_identity(self) -> None:
        led = Led.from_record({"id": "r1", "mac": "AA", "switchMac": "SW", "topic": "led/AA"})
        assert led.id == "r1"
        assert led.switch_mac == "SW"

    def test_legacy_capitalised_keys(self) -> None:
        led = Led.from_record({"ID": "r2", "Mac": "AA", "SwitchMac": "SW", "Topic": "led/AA"})
        assert (led.id, led.mac, led.switch_mac, led.topic) == ("r2", "AA", "SW", "led/AA")

    @pytest.mark.parametrize("id_key, topic_key", [("Id", "TOPIC"), ("iD", "ToPiC")])
    def test_identity_and_topic_keys_match_in_any_casing(self, id_key: str, topic_key: str) -> None:
        led = Led.from_record({id_key: "r3", "mac": "AA", topic_key: "led/AA"})
        assert (led.id, led.topic) == ("r3", "led/AA")

    def test_current_key_wins_over_legacy_key(self) -> None:
        led = Led.from_record({"topic": "led/new", "Topic": "led/old"})
        assert led.topic == "led/new"

    def test_numeric_identity_is_coerced(self) -> None:
        assert Led.from_record({"id": 17, "mac": "AA"}).id == "17"

    def test_not_a_mapping(self) -> None:
        with pytest.raises(LedBridgeDecodeError):
            Led.from_record(["AA"])

    def test_invalid_field_type(self) -> None:
        with pytest.raises(LedBridgeDecodeError):
            Led.from_record({"mac": "AA", "temperature": "hot"})

    def test_identity_only_decode_ignores_other_fields(self) -> None:
        identity = RecordIdentity.from_record({"id": "r3", "temperature": "hot"})
        assert identity.id == "r3"


# ------------------------------------------------------------------
# Requests and command envelopes
# ------------------------------------------------------------------


class TestRequests:
    def test_setup_optional_fields(self) -> None:
        setup = LedSetup.model_validate({"mac": "AA", "iMax": 500, "friendlyName": None})
        assert setup.i_max == 500
        assert setup.group is None
        assert setup.friendly_name is None

    def test_mac_is_required(self) -> None:
        with pytest.raises(ValidationError):
            LedConf.model_validate({"setpoint": 10})

    def test_blank_mac_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LedSetup.model_validate({"mac": "  "})

    def test_setup_command_payload(self) -> None:
        command = SetupCommand.from_request(LedSetup(mac="AA", auto=True, thresold_high=80))
        assert command.to_payload() == {"mac": "AA", "auto": True, "thresoldHigh": 80, "cmdType": "setup"}

    def test_update_command_payload(self) -> None:
        command = UpdateCommand.from_request(LedConf(mac="AA", is_configured=True, watchdog=0))
        assert json.loads(command.to_json()) == {
            "mac": "AA",
            "isConfigured": True,
            "watchdog": 0,
            "cmdType": "update",
        }
