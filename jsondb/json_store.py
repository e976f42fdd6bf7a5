from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import DatabaseFileNotFound, InvalidDocument, InvalidValue


def dumps_document(payload: Any, *, indent: int = 2) -> str:
    """Serialize a document the way it is stored on disk: stable indent, insertion order."""
    try:
        return json.dumps(payload, indent=indent, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise InvalidValue(f"Document is not valid JSON: {e}") from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def read_json(path: Path) -> dict[str, Any]:
    """
    Read a JSON object document from disk.

    Raises DatabaseFileNotFound when the file is missing or unreadable and
    InvalidDocument for empty files, invalid JSON (NaN and Infinity included),
    or a non-object root.
    """
    if not path.is_file():
        raise DatabaseFileNotFound(f"The database file could not be found: {path}")
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatabaseFileNotFound(f"The database file could not be read: {path}") from e
    except UnicodeDecodeError as e:
        raise InvalidDocument(f"The database file is not UTF-8 text: {path}") from e
    try:
        doc = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise InvalidDocument(f"The database file contains invalid JSON: {path}") from e
    if not isinstance(doc, dict):
        raise InvalidDocument(f"The database root must be a JSON object: {path}")
    return doc


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2) -> None:
    """
    Write JSON to disk by writing to a temp file then replacing.

    The payload is serialized before anything is touched, so a document
    that is not valid JSON leaves the file as it was. Any OS failure
    surfaces as DatabaseFileNotFound.
    """
    text = dumps_document(payload, indent=indent)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
        tmp_path.replace(path)
    except OSError as e:
        raise DatabaseFileNotFound(f"The database file could not be written: {path}") from e
