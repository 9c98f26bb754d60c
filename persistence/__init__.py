from __future__ import annotations

from .disk_store import DiskJsonDocumentStore
from .errors import LockContention, PersistenceError, SnapshotCorrupt, SnapshotIOError
from .interfaces import KeyValueDocumentStore
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry, exclusive_lock
from .snapshots import SnapshotLifecycle, persist, restore

__all__ = [
    "DiskJsonDocumentStore",
    "KeyValueDocumentStore",
    "LockContention",
    "PersistenceError",
    "SnapshotCorrupt",
    "SnapshotIOError",
    "GLOBAL_PATH_LOCKS",
    "PathLockRegistry",
    "exclusive_lock",
    "SnapshotLifecycle",
    "persist",
    "restore",
]
