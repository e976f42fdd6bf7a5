from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from .database import JsonDatabase, PathArg
from .settings import Settings
from .values import Number


class AsyncJsonDatabase:
    """
    Async wrapper around JsonDatabase.

    Writes run in asyncio.to_thread so file I/O stays off the event loop;
    once an awaited write returns, the change is on disk. Reads only touch
    memory and stay synchronous.

    Build it with `await AsyncJsonDatabase.open(...)` so the file is loaded
    before the first operation.
    """

    def __init__(self, database: JsonDatabase) -> None:
        self._db = database

    @classmethod
    async def open(cls, file: PathArg | None = None, *, settings: Settings | None = None) -> "AsyncJsonDatabase":
        database = await asyncio.to_thread(JsonDatabase, file, settings=settings)
        return cls(database)

    @property
    def database(self) -> JsonDatabase:
        return self._db

    @property
    def path(self) -> Path:
        return self._db.path

    # reads

    def fetch(self, key: str, default: Any = None) -> Any:
        return self._db.fetch(key, default)

    def has(self, key: str) -> bool:
        return self._db.has(key)

    def array_fetch(self, key: str, index: int, default: Any = None) -> Any:
        return self._db.array_fetch(key, index, default)

    def object_fetch(self, key: str, sub_key: str, default: Any = None) -> Any:
        return self._db.object_fetch(key, sub_key, default)

    def get_all_keys(self) -> list[str]:
        return self._db.get_all_keys()

    def get_all_values(self) -> list[Any]:
        return self._db.get_all_values()

    # writes

    async def load(self) -> None:
        await asyncio.to_thread(self._db.load)

    async def save(self) -> None:
        await asyncio.to_thread(self._db.save)

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._db.set, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._db.remove, key)

    async def delete_each(self, prefix: str) -> int:
        return await asyncio.to_thread(self._db.delete_each, prefix)

    async def clear(self) -> None:
        await asyncio.to_thread(self._db.clear)

    async def destroy(self) -> None:
        await asyncio.to_thread(self._db.destroy)

    async def push(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._db.push, key, value)

    async def delete(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._db.delete, key, value)

    async def delete_key(self, object_key: str, key: str) -> None:
        await asyncio.to_thread(self._db.delete_key, object_key, key)

    async def add(self, key: str, value: Number) -> Number:
        return await asyncio.to_thread(self._db.add, key, value)

    async def subtract(self, key: str, value: Number) -> Number:
        return await asyncio.to_thread(self._db.subtract, key, value)

    async def multiply(self, key: str, value: Number) -> Number:
        return await asyncio.to_thread(self._db.multiply, key, value)

    async def divide(self, key: str, value: Number) -> Number:
        return await asyncio.to_thread(self._db.divide, key, value)

    async def mod(self, key: str, value: Number) -> Number:
        return await asyncio.to_thread(self._db.mod, key, value)

    async def power(self, key: str, exponent: Number) -> Number:
        return await asyncio.to_thread(self._db.power, key, exponent)

    async def create_backup(self, backup_path: PathArg | None = None) -> Path:
        return await asyncio.to_thread(self._db.create_backup, backup_path)

    async def set_backup(self, backup_file: PathArg) -> Path:
        return await asyncio.to_thread(self._db.set_backup, backup_file)

    async def restore_backup(self, backup_path: PathArg | None = None) -> None:
        await asyncio.to_thread(self._db.restore_backup, backup_path)

    async def load_backup(self, backup_file: PathArg) -> None:
        await asyncio.to_thread(self._db.load_backup, backup_file)
