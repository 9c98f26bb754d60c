from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


def make_settings(**overrides):
    from settings import Settings

    base = dict(
        persist_file="",
        host="localhost",
        port=8080,
        secure=False,
        shutdown_grace_seconds=5.0,
        log_level="info",
    )
    base.update(overrides)
    return Settings(**base)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """
    Snapshot path inside a temp dir so tests never touch a real ./persist.json.
    """
    return tmp_path / "state" / "persist.json"


@pytest.fixture
def client():
    """
    Test client for an app with persistence disabled.
    """
    from fastapi.testclient import TestClient

    import app as app_module

    with TestClient(app_module.create_app(make_settings())) as c:
        yield c
