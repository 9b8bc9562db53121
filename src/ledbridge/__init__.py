"""ledbridge - LED driver state synchronization bridge."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ledbridge")
except PackageNotFoundError:
    __version__ = "0+local"
from ledbridge.config import BridgeConfig
from ledbridge.dispatcher import CommandDispatcher
from ledbridge.exceptions import (
    LedBridgeConfigError,
    LedBridgeDecodeError,
    LedBridgeError,
    LedBridgeStoreError,
    LedBridgeTransportError,
)
from ledbridge.models import Led, LedConf, LedSetup, SetupCommand, UpdateCommand
from ledbridge.service import LedService
from ledbridge.state.cache import DeviceCache
from ledbridge.state.reconciler import Reconciler, ReconcileResult
from ledbridge.store import InMemoryRecordStore, RecordStore, SqliteRecordStore

__all__ = [
    "__version__",
    "BridgeConfig",
    "CommandDispatcher",
    "DeviceCache",
    "InMemoryRecordStore",
    "Led",
    "LedBridgeConfigError",
    "LedBridgeDecodeError",
    "LedBridgeError",
    "LedBridgeStoreError",
    "LedBridgeTransportError",
    "LedConf",
    "LedService",
    "LedSetup",
    "Reconciler",
    "ReconcileResult",
    "RecordStore",
    "SetupCommand",
    "SqliteRecordStore",
    "UpdateCommand",
]
