from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from jsondb.database import JsonDatabase  # noqa: E402
from jsondb.settings import Settings  # noqa: E402


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Run inside a temp working directory with no JSONDB_* overrides so tests never touch real files.
    """
    for name in ("JSONDB_PATH", "JSONDB_BACKUP_PATH", "JSONDB_CREATE_IF_MISSING", "JSONDB_LOG_WRITES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings() -> Settings:
    return Settings(
        default_path="morsel-database.json",
        backup_path=None,
        create_if_missing=True,
        log_writes=False,
    )


@pytest.fixture
def db_path(sandbox_project: Path) -> Path:
    return sandbox_project / "store.json"


@pytest.fixture
def db(db_path: Path, settings: Settings) -> JsonDatabase:
    return JsonDatabase(db_path, settings=settings)
