from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from .errors import InvalidValue


def resolve_path(file: Any) -> Path:
    """Absolute path for a user-supplied file name (relative to the cwd)."""
    if not isinstance(file, (str, os.PathLike)):
        raise InvalidValue(f"The database path must be a string, got {type(file).__name__}")
    return Path(file).expanduser().resolve()


def default_backup_path(path: Path) -> Path:
    # morsel-database.json -> morsel-database.backup.json
    return path.with_name(f"{path.stem}.backup{path.suffix or '.json'}")
