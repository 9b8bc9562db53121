"""In-process cache of known LED drivers."""

from __future__ import annotations

import threading

from ledbridge.models.led import Led


class DeviceCache:
    """Last-known :class:`Led` per hardware address.

    Entries are never evicted; the population is bounded by the drivers
    wired to one controller. Cached values are frozen models, so readers
    never observe a half-written entry.

    ``lock_for`` hands out one lock per address. Holding it across a
    read-modify-write keeps two reports for the same driver from racing;
    different addresses never contend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._leds: dict[str, Led] = {}
        self._locks: dict[str, threading.Lock] = {}

    def get(self, mac: str) -> Led | None:
        return self._leds.get(mac)

    def put(self, mac: str, led: Led) -> None:
        with self._guard:
            self._leds[mac] = led

    def lock_for(self, mac: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(mac)
            if lock is None:
                lock = threading.Lock()
                self._locks[mac] = lock
            return lock

    def macs(self) -> list[str]:
        with self._guard:
            return list(self._leds)

    def __contains__(self, mac: object) -> bool:
        return mac in self._leds

    def __len__(self) -> int:
        return len(self._leds)
