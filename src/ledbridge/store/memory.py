"""Thread-safe in-memory record store."""

from __future__ import annotations

import copy
import threading
import uuid
from collections.abc import Mapping
from typing import Any

from ledbridge.exceptions import LedBridgeStoreError

ID_KEY = "id"


class InMemoryRecordStore:
    """Dict-backed :class:`~ledbridge.store.base.RecordStore`.

    Records live for the lifetime of the object. Identities are random
    UUID hex strings.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}

    def _table(self, table: str, operation: str) -> dict[str, dict[str, Any]]:
        rows = self._tables.get(table)
        if rows is None:
            raise LedBridgeStoreError(f"Unknown table {table!r}", table=table, operation=operation)
        return rows

    def create_table(self, table: str) -> None:
        with self._lock:
            self._tables.setdefault(table, {})

    def get_record(self, table: str, criteria: Mapping[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            rows = self._table(table, "get")
            for record_id, record in rows.items():
                if all(record.get(key) == value for key, value in criteria.items()):
                    return {**copy.deepcopy(record), ID_KEY: record_id}
        return None

    def insert_record(self, table: str, record: Mapping[str, Any]) -> str:
        record_id = uuid.uuid4().hex
        with self._lock:
            rows = self._table(table, "insert")
            rows[record_id] = {k: copy.deepcopy(v) for k, v in record.items() if k != ID_KEY}
        return record_id

    def update_record(self, table: str, record_id: str, record: Mapping[str, Any]) -> None:
        with self._lock:
            rows = self._table(table, "update")
            if record_id not in rows:
                raise LedBridgeStoreError(
                    f"No record {record_id!r} in table {table!r}",
                    table=table,
                    operation="update",
                )
            rows[record_id].update({k: copy.deepcopy(v) for k, v in record.items() if k != ID_KEY})

    def close(self) -> None:
        pass

    def __len__(self) -> int:
        with self._lock:
            return sum(len(rows) for rows in self._tables.values())
