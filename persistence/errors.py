from __future__ import annotations

from pathlib import Path


class PersistenceError(Exception):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class LockContention(PersistenceError):
    """
    The snapshot file is locked by another process (or another attempt in this one).
    """

    def __init__(self, path: Path) -> None:
        super().__init__(path, "snapshot file is locked")


class SnapshotIOError(PersistenceError):
    pass


class SnapshotCorrupt(SnapshotIOError):
    pass
