"""Record store layer.

The reconciler only needs get-by-criteria, insert-returning-id and
update-by-id; anything satisfying :class:`RecordStore` can back it.
"""

from ledbridge.store.base import RecordStore
from ledbridge.store.memory import InMemoryRecordStore
from ledbridge.store.sqlite import SqliteRecordStore

__all__ = ["InMemoryRecordStore", "RecordStore", "SqliteRecordStore"]
