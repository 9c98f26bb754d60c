from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import cli as cli_module


class _FakeServer:
    """
    Stands in for uvicorn.Server: runs the app's startup, then "receives a signal".
    """

    instances: list["_FakeServer"] = []
    fail_startup = False

    def __init__(self, config) -> None:
        self.config = config
        self.started = False
        _FakeServer.instances.append(self)

    def run(self) -> None:
        app = self.config.app
        if _FakeServer.fail_startup:
            return
        app.state.snapshots.restore_once()
        self.started = True
        app.state.store.set("from-cli", {"ok": True})


@pytest.fixture
def fake_server(monkeypatch: pytest.MonkeyPatch):
    _FakeServer.instances = []
    _FakeServer.fail_startup = False
    monkeypatch.setattr(cli_module.uvicorn, "Server", _FakeServer)
    return _FakeServer


def test_serve_passes_flags_to_uvicorn_and_persists_on_exit(fake_server, snapshot_file: Path):
    result = CliRunner().invoke(
        cli_module.cli,
        ["--file", str(snapshot_file), "--host", "127.0.0.1", "--port", "9999", "--grace", "2.5"],
    )
    assert result.exit_code == 0, result.output

    (server,) = fake_server.instances
    assert server.config.host == "127.0.0.1"
    assert server.config.port == 9999
    assert server.config.timeout_graceful_shutdown == 2.5
    assert server.config.ssl_certfile is None

    assert json.loads(snapshot_file.read_text(encoding="utf-8")) == {"from-cli": {"ok": True}}


def test_serve_secure_generates_certificate(fake_server, snapshot_file: Path):
    result = CliRunner().invoke(cli_module.cli, ["--file", str(snapshot_file), "--secure"])
    assert result.exit_code == 0, result.output

    (server,) = fake_server.instances
    assert server.config.ssl_certfile.endswith("cert.pem")
    assert server.config.ssl_keyfile.endswith("key.pem")
    # the temporary certificate directory is removed after shutdown
    assert not Path(server.config.ssl_certfile).exists()


def test_serve_exits_non_zero_when_startup_fails(fake_server, snapshot_file: Path):
    fake_server.fail_startup = True
    result = CliRunner().invoke(cli_module.cli, ["--file", str(snapshot_file)])

    assert result.exit_code == 1
    assert not snapshot_file.exists()


def test_environment_supplies_defaults(fake_server, monkeypatch: pytest.MonkeyPatch, snapshot_file: Path):
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.setenv("PERSIST_FILE", str(snapshot_file))
    monkeypatch.setenv("PORT", "7000")
    monkeypatch.setenv("SHUTDOWN_GRACE_SECONDS", "1")

    result = CliRunner().invoke(cli_module.cli, [])
    assert result.exit_code == 0, result.output

    (server,) = fake_server.instances
    assert server.config.port == 7000
    assert server.config.host == "localhost"
    assert server.config.timeout_graceful_shutdown == 1.0
    assert snapshot_file.exists()


class _ShutdownServer(_FakeServer):
    """
    Also runs the lifespan shutdown, so both the lifespan and the CLI try to persist.
    """

    def run(self) -> None:
        super().run()
        self.config.app.state.snapshots.persist_once()


def test_snapshot_is_written_once_when_lifespan_and_cli_both_persist(
    monkeypatch: pytest.MonkeyPatch, snapshot_file: Path
):
    import persistence.snapshots as snapshots

    _FakeServer.instances = []
    _FakeServer.fail_startup = False
    monkeypatch.setattr(cli_module.uvicorn, "Server", _ShutdownServer)

    writes: list[str] = []
    real_persist = snapshots.persist

    def _counting_persist(path, store):
        writes.append(str(path))
        return real_persist(path, store)

    monkeypatch.setattr(snapshots, "persist", _counting_persist)

    result = CliRunner().invoke(cli_module.cli, ["--file", str(snapshot_file)])
    assert result.exit_code == 0, result.output

    assert writes == [str(snapshot_file)]
    assert json.loads(snapshot_file.read_text(encoding="utf-8")) == {"from-cli": {"ok": True}}
