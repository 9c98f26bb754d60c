from __future__ import annotations

from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .errors import SnapshotCorrupt, SnapshotIOError
from .interfaces import KeyValueDocumentStore
from .locks import exclusive_lock


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    Stores a single JSON object on disk at a fixed path.

    - Returns None when the file does not exist (or is empty).
    - Raises SnapshotCorrupt if the file is not a JSON object.
    - Writes atomically, under an exclusive non-blocking lock.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any] | None:
        with exclusive_lock(self._path):
            try:
                raw = read_json(self._path)
            except (UnicodeDecodeError, ValueError, RecursionError) as e:
                raise SnapshotCorrupt(self._path, f"invalid JSON: {e!r}") from e
            except OSError as e:
                raise SnapshotIOError(self._path, str(e)) from e
        if raw is None:
            return None
        if not isinstance(raw, dict):
            raise SnapshotCorrupt(self._path, f"expected a JSON object, got {type(raw).__name__}")
        return raw

    def save(self, doc: dict[str, Any]) -> None:
        with exclusive_lock(self._path):
            try:
                atomic_write_json(self._path, doc)
            except (OSError, TypeError, ValueError) as e:
                raise SnapshotIOError(self._path, str(e)) from e
