"""LED driver models: device record, provisioning and settings requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Literal, TypeVar

from pydantic import Field, ValidationError, field_validator

from ledbridge._constants import CMD_SETUP, CMD_UPDATE
from ledbridge.exceptions import LedBridgeDecodeError
from ledbridge.models._base import COMMON_KEY_ALIASES, LedBaseModel

_RecordT = TypeVar("_RecordT", bound="_StoredModel")

_LED_KEY_ALIASES: dict[str, str] = {
    **COMMON_KEY_ALIASES,
    "SwitchMac": "switchMac",
}


class _StoredModel(LedBaseModel):
    """A model that can be decoded from an untyped store result."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = _LED_KEY_ALIASES
    # Store engines disagree on the casing of the primary key column.
    _CASELESS_KEYS: ClassVar[tuple[str, ...]] = ("ID", "topic")

    id: str | None = Field(default=None, alias="ID")
    """Persisted identity assigned by the record store; ``None`` until resolved."""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_identity(cls, value: Any) -> Any:
        if isinstance(value, (int, bytes)) and not isinstance(value, bool):
            return value.decode() if isinstance(value, bytes) else str(value)
        return value

    @classmethod
    def from_record(cls: type[_RecordT], record: Any) -> _RecordT:
        """Decode an untyped store result.

        Legacy key layouts (``Mac``, ``SwitchMac``) are upgraded through
        ``_KEY_ALIASES``; the identity and topic keys match in any casing.
        """
        if not isinstance(record, Mapping):
            raise LedBridgeDecodeError(f"Record is not an object: {type(record).__name__}")
        try:
            return cls.model_validate(dict(record))
        except ValidationError as exc:
            raise LedBridgeDecodeError(f"Invalid {cls.__name__} record: {exc}") from exc


class RecordIdentity(_StoredModel):
    """Only the identity of a stored record; every other key is ignored."""


class Led(_StoredModel):
    """A physical LED driver as reported by the driver and persisted by the bridge.

    Zero values mirror what an absent key means on the wire, so two
    reports compare equal exactly when every field matches.
    """

    mac: str = ""
    """Hardware address of the driver."""
    ip: str = ""
    group: int = 0
    protocol: str = ""
    topic: str = ""
    """Transport topic of the driver, e.g. ``led/AA11``."""
    switch_mac: str = ""
    """Address of the controller managing this driver."""
    is_configured: bool = False
    software_version: float = 0.0
    hardware_version: str = ""
    is_ble_enabled: bool = False
    temperature: int = 0
    error: int = 0
    reset_numbers: int = 0
    initial_setup_date: float = 0.0
    last_reset_date: float = 0.0
    i_max: int = 0
    slope_start: int = 0
    slope_stop: int = 0
    duration: float = 0.0
    setpoint: int = 0
    thresold_low: int = 0
    thresold_high: int = 0
    daisy_chain_enabled: bool = False
    daisy_chain_pos: int = 0
    device_power: int = 0
    energy: float = 0.0
    voltage_led: int = 0
    voltage_input: int = 0
    line_power: int = 0
    time_to_auto: int = 0
    auto: bool = False
    watchdog: int = 0
    friendly_name: str = ""

    def to_record(self) -> dict[str, Any]:
        """Return the store document. The identity is owned by the store and left out."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def with_identity(self, record_id: str | None) -> Led:
        return self.model_copy(update={"id": record_id})


class _MacRequest(LedBaseModel):
    """A request addressed to one driver by hardware address."""

    _KEY_ALIASES: ClassVar[dict[str, str]] = COMMON_KEY_ALIASES

    mac: str

    @field_validator("mac")
    @classmethod
    def _mac_non_empty(cls, value: str) -> str:
        mac = value.strip()
        if not mac:
            raise ValueError("mac must be non-empty")
        return mac


class LedSetup(_MacRequest):
    """Initial setup sent once the driver is authorized.

    Every field except ``mac`` is optional; ``None`` means "leave unchanged".
    """

    i_max: int | None = None
    group: int | None = None
    auto: bool | None = None
    watchdog: int | None = None
    is_ble_enabled: bool | None = None
    thresold_high: int | None = None
    thresold_low: int | None = None
    friendly_name: str | None = None


class LedConf(_MacRequest):
    """Settings the controller may change at any time."""

    group: int | None = None
    setpoint: int | None = None
    auto: bool | None = None
    watchdog: int | None = None
    is_configured: bool | None = None
    is_ble_enabled: bool | None = None
    thresold_high: int | None = None
    thresold_low: int | None = None
    friendly_name: str | None = None


class SetupCommand(LedSetup):
    """Outbound envelope for :class:`LedSetup`."""

    cmd_type: Literal["setup"] = CMD_SETUP

    @classmethod
    def from_request(cls, setup: LedSetup) -> SetupCommand:
        return cls.model_validate(setup.model_dump(exclude_none=True))


class UpdateCommand(LedConf):
    """Outbound envelope for :class:`LedConf`."""

    cmd_type: Literal["update"] = CMD_UPDATE

    @classmethod
    def from_request(cls, conf: LedConf) -> UpdateCommand:
        return cls.model_validate(conf.model_dump(exclude_none=True))
