from __future__ import annotations

from typing import Any, Protocol


class KeyValueDocumentStore(Protocol):
    """
    Minimal DB-friendly interface: a single JSON-like document persisted under a key.
    """

    def load(self) -> dict[str, Any] | None:
        """Load and return the full document, or None when nothing was saved yet."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Persist the full document atomically."""
        ...
