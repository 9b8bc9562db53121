"""Data models for LED driver payloads and store records."""

from ledbridge.models._base import COMMON_KEY_ALIASES, LedBaseModel
from ledbridge.models.led import Led, LedConf, LedSetup, RecordIdentity, SetupCommand, UpdateCommand

__all__ = [
    "COMMON_KEY_ALIASES",
    "Led",
    "LedBaseModel",
    "LedConf",
    "LedSetup",
    "RecordIdentity",
    "SetupCommand",
    "UpdateCommand",
]
