from __future__ import annotations

from pathlib import Path
from typing import Any

from .errors import DatabaseFileNotFound
from .interfaces import DocumentStore
from .json_store import atomic_write_json, read_json
from .locks import GLOBAL_PATH_LOCKS


class DiskJsonDocumentStore(DocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - `load` raises DatabaseFileNotFound / InvalidDocument instead of
      papering over a bad file.
    - Writes go through a temp file and a per-path lock.
    """

    def __init__(self, path: Path, *, indent: int = 2):
        self._path = path
        self._indent = indent

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> dict[str, Any]:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            return read_json(self._path)

    def save(self, doc: dict[str, Any]) -> None:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            atomic_write_json(self._path, doc, indent=self._indent)

    def delete(self) -> None:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            try:
                self._path.unlink()
            except OSError as e:
                raise DatabaseFileNotFound(f"The database file could not be deleted: {self._path}") from e
