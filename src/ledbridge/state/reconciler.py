"""Reconcile driver reports against the device cache and the record store.

This is the only component allowed to write driver records.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from ledbridge._constants import CRITERIA_MAC, CRITERIA_SWITCH_MAC, TABLE_NAME
from ledbridge.exceptions import LedBridgeDecodeError, LedBridgeStoreError
from ledbridge.models.led import Led
from ledbridge.state.cache import DeviceCache
from ledbridge.state.policy import is_unchanged, record_identity
from ledbridge.store.base import RecordStore

_logger = logging.getLogger(__name__)


class ReconcileResult(enum.Enum):
    UNCHANGED = "unchanged"
    INSERTED = "inserted"
    UPDATED = "updated"


class Reconciler:
    """Turns inbound driver reports into cache and store mutations.

    Goals:
    * no store I/O for a report identical to the cached one
    * one stored record per driver, across process restarts
    * a resolved identity is reused for the lifetime of the cache entry
    """

    def __init__(
        self,
        cache: DeviceCache,
        store: RecordStore,
        switch_mac: str,
        *,
        table: str = TABLE_NAME,
    ) -> None:
        self._cache = cache
        self._store = store
        self._switch_mac = switch_mac
        self._table = table

    @property
    def cache(self) -> DeviceCache:
        return self._cache

    def _criteria(self, mac: str) -> dict[str, Any]:
        return {CRITERIA_MAC: mac, CRITERIA_SWITCH_MAC: self._switch_mac}

    def lookup_record(self, mac: str) -> dict[str, Any] | None:
        """Fetch the stored record of *mac* under this controller, if any."""
        return self._store.get_record(self._table, self._criteria(mac))

    def reconcile(self, led: Led) -> ReconcileResult:
        """Merge *led* into the cache and the store.

        Raises :class:`LedBridgeStoreError` when the store write fails. The
        report stays cached without a new identity, so the next report for
        the same driver retries resolution.
        """
        mac = led.mac
        with self._cache.lock_for(mac):
            cached = self._cache.get(mac)
            record_id = cached.id if cached is not None else None
            # The identity never comes from the driver.
            led = led.with_identity(record_id)
            if is_unchanged(cached, led):
                return ReconcileResult.UNCHANGED

            self._cache.put(mac, led)

            if not record_id:
                # Restarted process: the store may already know this driver.
                try:
                    record_id = record_identity(self.lookup_record(mac))
                except LedBridgeStoreError as exc:
                    _logger.warning("Lookup of driver %s failed, inserting: %s", mac, exc)
                    record_id = None

            if record_id:
                self._store.update_record(self._table, record_id, led.to_record())
                result = ReconcileResult.UPDATED
            else:
                record_id = self._store.insert_record(self._table, led.to_record())
                result = ReconcileResult.INSERTED

            self._cache.put(mac, led.with_identity(record_id))
            _logger.debug("Driver %s %s as record %s", mac, result.value, record_id)
            return result

    def get_device(self, mac: str) -> Led | None:
        """Return the cached driver, else the stored one. Never populates the cache."""
        cached = self._cache.get(mac)
        if cached is not None:
            return cached
        try:
            record = self.lookup_record(mac)
        except LedBridgeStoreError as exc:
            _logger.warning("Lookup of driver %s failed: %s", mac, exc)
            return None
        if record is None:
            return None
        try:
            return Led.from_record(record)
        except LedBridgeDecodeError as exc:
            _logger.warning("Stored record of driver %s is invalid: %s", mac, exc)
            return None
