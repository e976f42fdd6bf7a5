from __future__ import annotations

import contextlib
import copy
import logging
import os
import threading
from pathlib import Path
from typing import Any, Iterator

from .disk_store import DiskJsonDocumentStore
from .errors import ArrayNotFound, DatabaseError, DivisionByZero, InvalidValue, ObjectNotFound
from .paths import default_backup_path, resolve_path
from .settings import Settings, get_settings
from .values import (
    MISSING,
    ZERO_GUARDED,
    Number,
    ValueKind,
    apply_arithmetic,
    kind_of,
    require_number,
    require_str,
    same_value,
    to_storable,
)

logger = logging.getLogger(__name__)

PathArg = str | os.PathLike[str]


class JsonDatabase:
    """
    A flat key/value store kept in memory and mirrored to one JSON file.

    Reads only look at memory. Every mutation changes the in-memory map and
    then rewrites the whole file before returning; if that write fails the
    map is rolled back to what it was before the call. One instance lock
    covers each call, so calls from several threads run one at a time.
    Reads hand back copies.

    The file is loaded before the constructor returns. A missing file is
    created empty unless `settings.create_if_missing` is off, in which case
    DatabaseFileNotFound propagates.
    """

    def __init__(self, file: PathArg | None = None, *, settings: Settings | None = None):
        self._settings = settings or get_settings()
        self._path = resolve_path(self._settings.default_path if file is None else file)
        self._store = DiskJsonDocumentStore(self._path)
        self._data: dict[str, Any] = {}
        self._backup_path: Path | None = (
            resolve_path(self._settings.backup_path) if self._settings.backup_path else None
        )
        # Held across mutate, save and rollback; reads take it too so they
        # never iterate the map while another thread changes it.
        self._lock = threading.RLock()

        if not self._store.exists() and self._settings.create_if_missing:
            logger.info("Creating empty database at %s", self._path)
            self.save()
        else:
            self.load()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def data(self) -> dict[str, Any]:
        """A deep copy of the current map; editing it does not touch the store."""
        with self._lock:
            return copy.deepcopy(self._data)

    @property
    def backup_path(self) -> Path | None:
        return self._backup_path

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return isinstance(key, str) and key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self._path)!r}, keys={len(self)})"

    # ------------------------------------------------------------------
    # load / save
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Replace the in-memory map with the file contents."""
        with self._lock:
            try:
                doc = self._store.load()
            except DatabaseError as e:
                logger.error("Error loading database %s: %s", self._path, e)
                raise
            self._data = doc
            logger.debug("Loaded %d keys from %s", len(doc), self._path)

    def save(self) -> None:
        """Overwrite the file with the full current map."""
        with self._lock:
            try:
                self._store.save(self._data)
            except DatabaseError as e:
                logger.error("Error saving database %s: %s", self._path, e)
                raise
            if self._settings.log_writes:
                logger.info("Saved %d keys to %s", len(self._data), self._path)
            else:
                logger.debug("Saved %d keys to %s", len(self._data), self._path)

    @contextlib.contextmanager
    def _mutation(self) -> Iterator[dict[str, Any]]:
        with self._lock:
            snapshot = copy.deepcopy(self._data)
            try:
                yield self._data
                self.save()
            except Exception:
                self._data = snapshot
                raise

    # ------------------------------------------------------------------
    # keys
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        require_str(key)
        stored = to_storable(value)
        with self._mutation() as data:
            data[key] = stored

    def fetch(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value at `key`, or `default`."""
        require_str(key)
        with self._lock:
            return copy.deepcopy(self._data.get(key, default))

    def has(self, key: str) -> bool:
        require_str(key)
        with self._lock:
            return key in self._data

    def remove(self, key: str) -> None:
        require_str(key)
        with self._mutation() as data:
            data.pop(key, None)

    def delete_each(self, prefix: str) -> int:
        """Delete every key starting with `prefix`. Returns how many went."""
        require_str(prefix)
        with self._mutation() as data:
            doomed = [k for k in data if k.startswith(prefix)]
            for k in doomed:
                del data[k]
        return len(doomed)

    def clear(self) -> None:
        with self._mutation() as data:
            data.clear()

    def destroy(self) -> None:
        """
        Delete the backing file and empty the map.

        The file stays absent until the next mutation writes it again.
        """
        with self._lock:
            try:
                self._store.delete()
            except DatabaseError as e:
                logger.error("Error destroying database %s: %s", self._path, e)
                raise
            self._data = {}
        logger.info("Destroyed database %s", self._path)

    def get_all_keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def get_all_values(self) -> list[Any]:
        with self._lock:
            return copy.deepcopy(list(self._data.values()))

    # ------------------------------------------------------------------
    # arrays
    # ------------------------------------------------------------------

    def push(self, key: str, value: Any) -> None:
        """
        Append `value` to the list at `key`.

        Whatever was at `key` before, if it is not a list, is replaced by a
        fresh empty list first.
        """
        require_str(key)
        stored = to_storable(value)
        with self._mutation() as data:
            if kind_of(data.get(key, MISSING)) is not ValueKind.ARRAY:
                data[key] = []
            data[key].append(stored)

    def array_fetch(self, key: str, index: int, default: Any = None) -> Any:
        require_str(key)
        if not isinstance(index, int) or isinstance(index, bool):
            raise InvalidValue(f"Expected an integer index, got {type(index).__name__}")
        with self._lock:
            array = self._data.get(key, MISSING)
            if kind_of(array) is not ValueKind.ARRAY:
                raise ArrayNotFound()
            if 0 <= index < len(array):
                return copy.deepcopy(array[index])
        return default

    def delete(self, key: str, value: Any) -> None:
        """Remove every element equal to `value` from the list at `key`; no-op for non-lists."""
        require_str(key)
        target = to_storable(value)
        with self._lock:
            if kind_of(self._data.get(key, MISSING)) is not ValueKind.ARRAY:
                return
            with self._mutation() as data:
                data[key] = [item for item in data[key] if not same_value(item, target)]

    # ------------------------------------------------------------------
    # objects
    # ------------------------------------------------------------------

    def _object_at(self, key: str) -> dict[str, Any]:
        obj = self._data.get(key, MISSING)
        if kind_of(obj) is not ValueKind.OBJECT:
            raise ObjectNotFound()
        return obj

    def object_fetch(self, key: str, sub_key: str, default: Any = None) -> Any:
        require_str(key, sub_key)
        with self._lock:
            obj = self._object_at(key)
            if sub_key not in obj:
                return default
            return copy.deepcopy(obj[sub_key])

    def delete_key(self, object_key: str, key: str) -> None:
        require_str(object_key, key)
        with self._lock:
            self._object_at(object_key)
            with self._mutation() as data:
                data[object_key].pop(key, None)

    # ------------------------------------------------------------------
    # arithmetic
    # ------------------------------------------------------------------

    def _apply(self, operation: str, key: str, operand: Any) -> Number:
        require_str(key)
        require_number(operand)
        if operation in ZERO_GUARDED and operand == 0:
            raise DivisionByZero()
        with self._lock:
            current = self._data.get(key, MISSING)
            if kind_of(current) is not ValueKind.NUMBER:
                raise InvalidValue(f"The value at {key!r} is not a number.")
            result = apply_arithmetic(operation, current, operand)
            with self._mutation() as data:
                data[key] = result
        return result

    def add(self, key: str, value: Number) -> Number:
        return self._apply("add", key, value)

    def subtract(self, key: str, value: Number) -> Number:
        return self._apply("subtract", key, value)

    def multiply(self, key: str, value: Number) -> Number:
        return self._apply("multiply", key, value)

    def divide(self, key: str, value: Number) -> Number:
        return self._apply("divide", key, value)

    def mod(self, key: str, value: Number) -> Number:
        return self._apply("mod", key, value)

    def power(self, key: str, exponent: Number) -> Number:
        return self._apply("power", key, exponent)

    # ------------------------------------------------------------------
    # backups
    # ------------------------------------------------------------------

    def _backup_store(self, backup_path: PathArg | None) -> DiskJsonDocumentStore:
        if backup_path is not None:
            path = resolve_path(backup_path)
        elif self._backup_path is not None:
            path = self._backup_path
        else:
            path = default_backup_path(self._path)
        return DiskJsonDocumentStore(path)

    def create_backup(self, backup_path: PathArg | None = None) -> Path:
        """
        Write the current map to a backup file and return its path.

        Falls back to the remembered backup path, then to
        `<name>.backup.json` beside the database file.
        """
        store = self._backup_store(backup_path)
        with self._lock:
            try:
                store.save(self._data)
            except DatabaseError as e:
                logger.error("Error writing backup %s: %s", store.path, e)
                raise
        logger.info("Backed up %s to %s", self._path, store.path)
        return store.path

    def set_backup(self, backup_file: PathArg) -> Path:
        """Remember `backup_file` as the backup location and write a backup there."""
        path = resolve_path(backup_file)
        with self._lock:
            self._backup_path = path
            return self.create_backup()

    def restore_backup(self, backup_path: PathArg | None = None) -> None:
        """Replace the map with a backup file's contents and persist it to the database file."""
        store = self._backup_store(backup_path)
        try:
            doc = store.load()
        except DatabaseError as e:
            logger.error("Error reading backup %s: %s", store.path, e)
            raise
        with self._mutation() as data:
            data.clear()
            data.update(doc)
        logger.info("Restored %s from %s", self._path, store.path)

    def load_backup(self, backup_file: PathArg) -> None:
        self.restore_backup(backup_file)
