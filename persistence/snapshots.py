from __future__ import annotations

import logging
import threading
from pathlib import Path

from resources.errors import ResourceError
from resources.store import ResourceStore

from .disk_store import DiskJsonDocumentStore
from .errors import SnapshotCorrupt

logger = logging.getLogger(__name__)


def _snapshot_path(path: str | Path | None) -> Path | None:
    if path is None:
        return None
    if isinstance(path, str) and not path.strip():
        return None
    return Path(path)


def restore(path: str | Path | None, store: ResourceStore) -> bool:
    """
    Load the snapshot at `path` into `store`, replacing its contents.

    Returns True if a snapshot was loaded. A disabled path (None/empty) or a
    missing file leaves the store untouched and is not an error.
    """
    snapshot_path = _snapshot_path(path)
    if snapshot_path is None:
        return False

    doc = DiskJsonDocumentStore(snapshot_path).load()
    if doc is None:
        logger.info("SNAPSHOT RESTORE: no state to restore from %s", snapshot_path)
        return False
    try:
        store.load(doc)
    except (TypeError, ValueError, ResourceError) as e:
        raise SnapshotCorrupt(snapshot_path, str(e)) from e
    logger.info("SNAPSHOT RESTORE: %d resource(s) restored from %s", len(doc), snapshot_path)
    return True


def persist(path: str | Path | None, store: ResourceStore) -> bool:
    """
    Write the whole store to `path` as one JSON object keyed by namespace.

    Returns True if a snapshot was written, False when persistence is disabled.
    """
    snapshot_path = _snapshot_path(path)
    if snapshot_path is None:
        return False

    doc = store.snapshot()
    DiskJsonDocumentStore(snapshot_path).save(doc)
    logger.info("SNAPSHOT PERSIST: %d resource(s) persisted to %s", len(doc), snapshot_path)
    return True


class SnapshotLifecycle:
    """
    Ties one store to one snapshot path for the life of the process.

    restore_once() runs before serving; persist_once() after serving stops.
    The snapshot is written at most once, and never if the restore failed:
    an empty store must not replace a snapshot that could not be loaded.
    """

    def __init__(self, store: ResourceStore, path: str | Path | None) -> None:
        self.store = store
        self.path = _snapshot_path(path)
        self._guard = threading.Lock()
        self._restored = False
        self._persisted = False

    @property
    def enabled(self) -> bool:
        return self.path is not None

    @property
    def restored(self) -> bool:
        return self._restored

    @property
    def persisted(self) -> bool:
        return self._persisted

    def restore_once(self) -> None:
        """
        Restore the snapshot. Errors propagate: startup must not continue.
        """
        with self._guard:
            if self._restored:
                return
            restore(self.path, self.store)
            self._restored = True

    def persist_once(self) -> bool:
        """
        Persist the snapshot on the first call. Failures are logged, not raised.
        """
        with self._guard:
            if self._persisted:
                return False
            self._persisted = True
            if not self._restored:
                logger.warning("SNAPSHOT PERSIST: skipped, state was never restored from %s", self.path)
                return False
            try:
                return persist(self.path, self.store)
            except Exception as e:
                logger.error("SNAPSHOT PERSIST: failed to write %s: %r", self.path, e)
                return False
