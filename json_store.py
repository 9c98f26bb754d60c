from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def reject_constant(name: str) -> Any:
    """
    `parse_constant` hook: NaN and +/-Infinity are not JSON and cannot be written back out.
    """
    raise ValueError(f"non-JSON constant {name!r}")


def loads_strict(raw: str | bytes) -> Any:
    return json.loads(raw, parse_constant=reject_constant)


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing or empty files. Invalid JSON (including non-UTF-8
    bytes and NaN/Infinity) raises ValueError; callers decide whether that is fatal.
    """
    if not path.exists():
        return None
    raw = path.read_text(encoding="utf-8")
    if not raw.strip():
        return None
    return loads_strict(raw)


def _fsync_dir(directory: Path) -> None:
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2, sort_keys: bool = True) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    The temp file is flushed to disk before the rename and removed if anything
    fails, so readers only ever see the old file or the complete new one. The
    directory is synced after the rename so the new entry survives a crash.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=indent, sort_keys=sort_keys, allow_nan=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    _fsync_dir(path.parent)
