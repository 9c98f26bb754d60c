from __future__ import annotations

import contextlib
import fcntl
import os
import threading
from pathlib import Path
from typing import Iterator

from .errors import LockContention


class PathLockRegistry:
    """
    Provides a stable lock per normalized file path to avoid global contention.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


GLOBAL_PATH_LOCKS = PathLockRegistry()


def lock_path(path: Path) -> Path:
    # The data file itself is swapped by rename, so the advisory lock lives beside it.
    return path.with_name(path.name + ".lock")


@contextlib.contextmanager
def exclusive_lock(path: Path, *, registry: PathLockRegistry = GLOBAL_PATH_LOCKS) -> Iterator[None]:
    """
    Hold an exclusive advisory lock on `path` for the duration of the block.

    Single non-blocking attempt: raises LockContention immediately if another
    thread of this process or another process holds it. Released on every exit.
    """
    local = registry.lock_for(path)
    if not local.acquire(blocking=False):
        raise LockContention(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(lock_path(path), os.O_RDWR | os.O_CREAT, 0o664)
        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError as e:
                raise LockContention(path) from e
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)
    finally:
        local.release()
