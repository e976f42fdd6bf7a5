from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class DocumentStore(Protocol):
    """
    A single JSON object document persisted in full on every save.
    """

    @property
    def path(self) -> Path: ...

    def exists(self) -> bool: ...

    def load(self) -> dict[str, Any]:
        """Load and return the full document. Raises on missing or invalid content."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Overwrite the document with `doc`."""
        ...

    def delete(self) -> None:
        """Remove the document from storage."""
        ...
