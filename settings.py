from __future__ import annotations

import os
from dataclasses import dataclass, replace


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


DEFAULT_PERSIST_FILE = "persist.json"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8080
DEFAULT_SHUTDOWN_GRACE_SECONDS = 5.0


@dataclass(frozen=True)
class Settings:
    # Persistence: empty string disables snapshots entirely
    persist_file: str

    # Listener
    host: str
    port: int
    secure: bool

    # Shutdown: seconds in-flight requests may take to finish after a signal
    shutdown_grace_seconds: float

    log_level: str

    @property
    def persistence_enabled(self) -> bool:
        return bool(self.persist_file.strip())

    def with_overrides(self, **changes: object) -> "Settings":
        """Return a copy with every non-None override applied (CLI flags win over env)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def get_settings() -> Settings:
    return Settings(
        persist_file=os.getenv("PERSIST_FILE", DEFAULT_PERSIST_FILE),
        host=os.getenv("HOST", DEFAULT_HOST),
        port=_env_int("PORT", DEFAULT_PORT),
        secure=_env_bool("SECURE", False),
        shutdown_grace_seconds=_env_float("SHUTDOWN_GRACE_SECONDS", DEFAULT_SHUTDOWN_GRACE_SECONDS),
        log_level=os.getenv("LOG_LEVEL", "info").strip().lower() or "info",
    )
