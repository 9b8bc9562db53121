"""Change-detection and identity policy for driver reports.

This module intentionally contains *no* store or cache access; the
reconciler feeds it the values it needs.
"""

from __future__ import annotations

from typing import Any

from ledbridge.exceptions import LedBridgeDecodeError
from ledbridge.models.led import Led, RecordIdentity


def is_unchanged(cached: Led | None, incoming: Led) -> bool:
    """Whether *incoming* (already carrying the cached identity) repeats *cached*.

    Every field takes part in the comparison, telemetry included. An entry
    whose write never succeeded has no identity and is never considered
    unchanged, so the next report retries the write.
    """
    if cached is None or not cached.id:
        return False
    return cached == incoming


def record_identity(record: dict[str, Any] | None) -> str | None:
    """Extract the persisted identity from an untyped store result.

    Returns ``None`` when the record is absent or carries no usable
    identity, so the caller falls through to an insert.
    """
    if record is None:
        return None
    try:
        identity = RecordIdentity.from_record(record)
    except LedBridgeDecodeError:
        return None
    return identity.id or None
