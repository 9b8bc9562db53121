from __future__ import annotations

from ledbridge.models.led import Led
from ledbridge.state.policy import is_unchanged, record_identity


def test_unseen_device_is_changed() -> None:
    assert not is_unchanged(None, Led(mac="AA"))


def test_identical_resolved_device_is_unchanged() -> None:
    cached = Led(mac="AA", temperature=21).with_identity("1")
    assert is_unchanged(cached, Led(mac="AA", temperature=21).with_identity("1"))


def test_single_field_difference_is_a_change() -> None:
    cached = Led(mac="AA", temperature=21).with_identity("1")
    assert not is_unchanged(cached, Led(mac="AA", temperature=45).with_identity("1"))


def test_unpersisted_entry_is_never_unchanged() -> None:
    cached = Led(mac="AA", temperature=21)
    assert not is_unchanged(cached, Led(mac="AA", temperature=21))


def test_record_identity_variants() -> None:
    assert record_identity(None) is None
    assert record_identity({"mac": "AA"}) is None
    assert record_identity({"id": ""}) is None
    assert record_identity({"id": "x"}) == "x"
    assert record_identity({"ID": "y"}) == "y"
    assert record_identity({"ID": ["not", "an", "id"]}) is None
