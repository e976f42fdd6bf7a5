from __future__ import annotations

from .async_database import AsyncJsonDatabase
from .database import JsonDatabase
from .errors import (
    ArrayNotFound,
    DatabaseError,
    DatabaseFileNotFound,
    DivisionByZero,
    InvalidDocument,
    InvalidValue,
    KeyNotFound,
    ObjectNotFound,
)
from .settings import Settings, get_settings

__all__ = [
    "JsonDatabase",
    "AsyncJsonDatabase",
    "Settings",
    "get_settings",
    "DatabaseError",
    "DatabaseFileNotFound",
    "InvalidDocument",
    "InvalidValue",
    "KeyNotFound",
    "ObjectNotFound",
    "ArrayNotFound",
    "DivisionByZero",
]
