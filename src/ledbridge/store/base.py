"""Record store protocol."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RecordStore(Protocol):
    """Document store keyed by a store-assigned identity.

    Criteria matching is exact equality on named fields. Every method
    raises :class:`ledbridge.exceptions.LedBridgeStoreError` on failure.
    """

    def create_table(self, table: str) -> None:
        """Create *table* if it does not exist."""

    def get_record(self, table: str, criteria: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the first record matching *criteria* (with its ``id``), or ``None``."""

    def insert_record(self, table: str, record: Mapping[str, Any]) -> str:
        """Insert *record* and return the identity assigned to it."""

    def update_record(self, table: str, record_id: str, record: Mapping[str, Any]) -> None:
        """Replace the fields of the record identified by *record_id*."""

    def close(self) -> None:
        """Release any held resources."""
