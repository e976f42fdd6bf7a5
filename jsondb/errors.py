from __future__ import annotations


class DatabaseError(Exception):
    """
    Base class for every failure raised by the store.

    Each subclass carries a default message so callers can raise the kind
    bare and still get a readable error.
    """

    default_message = "The database operation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class DatabaseFileNotFound(DatabaseError):
    default_message = "The database file could not be found."


class InvalidDocument(DatabaseError):
    default_message = "The database file contains invalid JSON."


class InvalidValue(DatabaseError, ValueError):
    default_message = "The value provided cannot be null or undefined."


class KeyNotFound(DatabaseError):
    default_message = "The requested key does not exist in the database."


class ObjectNotFound(DatabaseError):
    default_message = "The requested key is not an object."


class ArrayNotFound(DatabaseError):
    default_message = "The requested key is not an array."


class DivisionByZero(DatabaseError, ZeroDivisionError):
    default_message = "Cannot divide by zero."


__all__ = [
    "DatabaseError",
    "DatabaseFileNotFound",
    "InvalidDocument",
    "InvalidValue",
    "KeyNotFound",
    "ObjectNotFound",
    "ArrayNotFound",
    "DivisionByZero",
]
