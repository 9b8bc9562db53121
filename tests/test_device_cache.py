from __future__ import annotations

import threading

from ledbridge.models.led import Led
from ledbridge.state.cache import DeviceCache


def test_get_missing_returns_none() -> None:
    cache = DeviceCache()
    assert cache.get("AA") is None
    assert "AA" not in cache
    assert len(cache) == 0


def test_put_replaces_entry() -> None:
    cache = DeviceCache()
    cache.put("AA", Led(mac="AA", temperature=1))
    cache.put("AA", Led(mac="AA", temperature=2))

    assert len(cache) == 1
    assert cache.get("AA").temperature == 2  # type: ignore[union-attr]
    assert cache.macs() == ["AA"]


def test_lock_for_is_stable_per_address() -> None:
    cache = DeviceCache()
    assert cache.lock_for("AA") is cache.lock_for("AA")
    assert cache.lock_for("AA") is not cache.lock_for("BB")


def test_lock_for_other_address_does_not_block() -> None:
    cache = DeviceCache()
    acquired = threading.Event()

    def _other() -> None:
        with cache.lock_for("BB"):
            acquired.set()

    with cache.lock_for("AA"):
        worker = threading.Thread(target=_other)
        worker.start()
        assert acquired.wait(timeout=2.0)
        worker.join(timeout=2.0)
