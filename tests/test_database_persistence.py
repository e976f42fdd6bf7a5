from __future__ import annotations

import dataclasses
import json
import logging

import pytest

import jsondb.disk_store as disk_store
from jsondb.database import JsonDatabase
from jsondb.errors import DatabaseFileNotFound, InvalidDocument, InvalidValue


def test_missing_file_is_created_empty(db_path, settings):
    db = JsonDatabase(db_path, settings=settings)
    assert db.path == db_path.resolve()
    assert db_path.read_text(encoding="utf-8") == "{}"
    assert db.get_all_keys() == []


def test_missing_file_without_create_fails(db_path, settings):
    strict = dataclasses.replace(settings, create_if_missing=False)
    with pytest.raises(DatabaseFileNotFound):
        JsonDatabase(db_path, settings=strict)
    assert not db_path.exists()


@pytest.mark.parametrize("content", ["", "{not json", "[1, 2, 3]", '"text"', '{"x": NaN}', '{"x": -Infinity}'])
def test_invalid_document(db_path, settings, content):
    db_path.write_text(content, encoding="utf-8")
    with pytest.raises(InvalidDocument):
        JsonDatabase(db_path, settings=settings)


def test_non_string_path_rejected(settings):
    with pytest.raises(InvalidValue):
        JsonDatabase(123, settings=settings)  # type: ignore[arg-type]


def test_default_path_resolves_in_working_directory(sandbox_project, settings):
    db = JsonDatabase(settings=settings)
    assert db.path == (sandbox_project / "morsel-database.json").resolve()
    assert db.path.exists()


def test_round_trip_through_new_instance(db, db_path, settings):
    tree = {
        "name": "widget",
        "count": 3,
        "ratio": 0.5,
        "enabled": False,
        "tags": ["a", "b", {"nested": [1, 2, None]}],
        "meta": {"owner": {"id": 7}, "empty": {}},
    }
    for k, v in tree.items():
        db.set(k, v)

    reopened = JsonDatabase(db_path, settings=settings)
    for k, v in tree.items():
        assert reopened.fetch(k) == v
    assert reopened.get_all_keys() == list(tree)


def test_file_is_exact_two_space_serialization(db, db_path):
    db.set("b", 1)
    db.set("a", {"x": [1, 2]})
    db.set("é", "ü")
    text = db_path.read_text(encoding="utf-8")
    assert text == json.dumps(db.data, indent=2, ensure_ascii=False)
    # insertion order, not sorted
    assert text.index('"b"') < text.index('"a"')


def test_load_picks_up_external_changes(db, db_path):
    db_path.write_text(json.dumps({"outside": True}), encoding="utf-8")
    db.load()
    assert db.fetch("outside") is True


def test_load_of_deleted_file_fails(db, db_path):
    db_path.unlink()
    with pytest.raises(DatabaseFileNotFound):
        db.load()


def test_save_failure_rolls_back_memory(db, db_path, monkeypatch):
    db.set("keep", 1)

    def _fail(path, payload, *, indent=2):
        raise DatabaseFileNotFound("disk gone")

    monkeypatch.setattr(disk_store, "atomic_write_json", _fail)

    with pytest.raises(DatabaseFileNotFound):
        db.set("lost", 2)
    with pytest.raises(DatabaseFileNotFound):
        db.clear()

    assert db.has("lost") is False
    assert db.fetch("keep") == 1
    assert json.loads(db_path.read_text(encoding="utf-8")) == {"keep": 1}


def test_save_failure_is_logged(db, monkeypatch, caplog):
    def _fail(path, payload, *, indent=2):
        raise DatabaseFileNotFound("disk gone")

    monkeypatch.setattr(disk_store, "atomic_write_json", _fail)

    with caplog.at_level(logging.ERROR, logger="jsondb.database"):
        with pytest.raises(DatabaseFileNotFound):
            db.set("x", 1)
    assert "Error saving database" in caplog.text


def test_log_writes_setting(db_path, settings, caplog):
    db = JsonDatabase(db_path, settings=dataclasses.replace(settings, log_writes=True))
    with caplog.at_level(logging.INFO, logger="jsondb.database"):
        db.set("x", 1)
    assert "Saved 1 keys" in caplog.text


def test_write_to_unwritable_location(sandbox_project, settings):
    blocker = sandbox_project / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(DatabaseFileNotFound):
        JsonDatabase(blocker / "store.json", settings=settings)
