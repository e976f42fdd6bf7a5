from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(name: str) -> str | None:
    raw = os.getenv(name, "").strip()
    return raw or None


@dataclass(frozen=True)
class Settings:
    # Storage
    default_path: str
    backup_path: str | None

    # Missing file at startup: write an empty document instead of failing
    create_if_missing: bool

    # Debug
    log_writes: bool


def get_settings() -> Settings:
    default_path = os.getenv("JSONDB_PATH", "").strip() or "morsel-database.json"
    backup_path = _env_optional("JSONDB_BACKUP_PATH")

    create_if_missing = _env_bool("JSONDB_CREATE_IF_MISSING", True)
    log_writes = _env_bool("JSONDB_LOG_WRITES", False)

    return Settings(
        default_path=default_path,
        backup_path=backup_path,
        create_if_missing=create_if_missing,
        log_writes=log_writes,
    )
