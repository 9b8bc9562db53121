"""SQLite-backed record store.

Each record table holds JSON documents keyed by a store-assigned identity::

    CREATE TABLE <table> (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )

Criteria are matched with ``json_extract`` on the document.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
import threading
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ledbridge.exceptions import LedBridgeStoreError
from ledbridge.store.memory import ID_KEY

_logger = logging.getLogger(__name__)

BUSY_TIMEOUT_MS = 5000
MEMORY_PATH = ":memory:"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_identifier(name: str, *, table: str, operation: str) -> str:
    if not _IDENTIFIER.match(name):
        raise LedBridgeStoreError(f"Invalid identifier {name!r}", table=table, operation=operation)
    return name


def _configure_connection(conn: sqlite3.Connection, *, wal: bool) -> None:
    """Apply connection-wide pragmas suitable for concurrent writers."""

    conn.row_factory = sqlite3.Row
    if wal:
        conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA synchronous = NORMAL")
    conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")


def _encode(record: Mapping[str, Any], *, table: str, operation: str) -> str:
    document = {key: value for key, value in record.items() if key != ID_KEY}
    try:
        return json.dumps(document, sort_keys=True)
    except (TypeError, ValueError) as exc:
        raise LedBridgeStoreError(f"Record is not serialisable: {exc}", table=table, operation=operation) from exc


class SqliteRecordStore:
    """:class:`~ledbridge.store.base.RecordStore` persisted in a SQLite file.

    A single connection is shared between worker threads and guarded by a
    lock; SQLite serializes writers anyway.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._lock = threading.Lock()
        if self._path != MEMORY_PATH:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn: sqlite3.Connection | None = sqlite3.connect(
                self._path,
                check_same_thread=False,
                isolation_level=None,
            )
            _configure_connection(self._conn, wal=self._path != MEMORY_PATH)
        except sqlite3.Error as exc:
            raise LedBridgeStoreError(f"Cannot open database {self._path}: {exc}", operation="connect") from exc
        _logger.debug("Opened record store %s", self._path)

    def _execute(self, sql: str, params: tuple[Any, ...], *, table: str, operation: str) -> sqlite3.Cursor:
        conn = self._conn
        if conn is None:
            raise LedBridgeStoreError("Record store is closed", table=table, operation=operation)
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise LedBridgeStoreError(f"{operation} on {table} failed: {exc}", table=table, operation=operation) from exc

    def create_table(self, table: str) -> None:
        _check_identifier(table, table=table, operation="create")
        with self._lock:
            self._execute(
                f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    id TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL DEFAULT (datetime('now')),
                    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
                )
                """,
                (),
                table=table,
                operation="create",
            )

    def get_record(self, table: str, criteria: Mapping[str, Any]) -> dict[str, Any] | None:
        _check_identifier(table, table=table, operation="get")
        clauses: list[str] = []
        params: list[Any] = []
        for key, value in criteria.items():
            _check_identifier(key, table=table, operation="get")
            clauses.append("json_extract(data, ?) = ?")
            params.extend((f"$.{key}", value))
        where = " AND ".join(clauses) if clauses else "1 = 1"
        with self._lock:
            row = self._execute(
                f"SELECT id, data FROM {table} WHERE {where} ORDER BY created_at, rowid LIMIT 1",
                tuple(params),
                table=table,
                operation="get",
            ).fetchone()
        if row is None:
            return None
        try:
            document = json.loads(row["data"])
        except json.JSONDecodeError as exc:
            raise LedBridgeStoreError(f"Corrupt record {row['id']}: {exc}", table=table, operation="get") from exc
        if not isinstance(document, dict):
            raise LedBridgeStoreError(f"Corrupt record {row['id']}: not an object", table=table, operation="get")
        document[ID_KEY] = row["id"]
        return document

    def insert_record(self, table: str, record: Mapping[str, Any]) -> str:
        _check_identifier(table, table=table, operation="insert")
        data = _encode(record, table=table, operation="insert")
        record_id = uuid.uuid4().hex
        with self._lock:
            self._execute(
                f"INSERT INTO {table} (id, data) VALUES (?, ?)",
                (record_id, data),
                table=table,
                operation="insert",
            )
        return record_id

    def update_record(self, table: str, record_id: str, record: Mapping[str, Any]) -> None:
        _check_identifier(table, table=table, operation="update")
        data = _encode(record, table=table, operation="update")
        with self._lock:
            cursor = self._execute(
                f"UPDATE {table} SET data = json_patch(data, ?), updated_at = datetime('now') WHERE id = ?",
                (data, record_id),
                table=table,
                operation="update",
            )
        if cursor.rowcount == 0:
            raise LedBridgeStoreError(
                f"No record {record_id!r} in table {table!r}",
                table=table,
                operation="update",
            )

    def close(self) -> None:
        with self._lock:
            conn = self._conn
            self._conn = None
        if conn is not None:
            conn.close()
            _logger.debug("Closed record store %s", self._path)
