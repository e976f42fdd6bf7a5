from __future__ import annotations

import json

import pytest

from jsondb.database import JsonDatabase
from jsondb.errors import DatabaseFileNotFound, InvalidValue


def _on_disk(db: JsonDatabase) -> dict:
    return json.loads(db.path.read_text(encoding="utf-8"))


def test_set_fetch_has(db):
    db.set("greeting", "hello")
    assert db.fetch("greeting") == "hello"
    assert db.has("greeting") is True
    assert "greeting" in db
    assert len(db) == 1
    assert _on_disk(db) == {"greeting": "hello"}


def test_set_overwrites(db):
    db.set("k", 1)
    db.set("k", [1, 2])
    assert db.fetch("k") == [1, 2]


def test_fetch_missing_returns_default(db):
    assert db.fetch("nope") is None
    assert db.fetch("nope", default="fallback") == "fallback"
    assert db.has("nope") is False
    assert "nope" not in db


def test_set_rejects_none(db):
    with pytest.raises(InvalidValue):
        db.set("k", None)
    assert db.has("k") is False


def test_nested_null_is_plain_json(db):
    db.set("k", {"maybe": None, "list": [None]})
    assert db.fetch("k") == {"maybe": None, "list": [None]}


def test_set_rejects_unserializable(db):
    with pytest.raises(InvalidValue):
        db.set("k", object())
    with pytest.raises(InvalidValue):
        db.set("k", {1: "int key"})


@pytest.mark.parametrize("key", [1, None, b"bytes", ("t",)])
def test_non_string_keys_rejected(db, key):
    with pytest.raises(InvalidValue):
        db.set(key, 1)
    with pytest.raises(InvalidValue):
        db.fetch(key)
    with pytest.raises(InvalidValue):
        db.has(key)
    with pytest.raises(InvalidValue):
        db.remove(key)


def test_invalid_value_is_a_value_error(db):
    with pytest.raises(ValueError):
        db.set("k", None)


def test_stored_value_is_detached_from_caller(db):
    payload = {"items": [1, 2]}
    db.set("k", payload)
    payload["items"].append(3)
    assert db.fetch("k") == {"items": [1, 2]}


def test_reads_return_copies(db):
    db.set("k", {"items": [1, 2]})
    db.fetch("k")["items"].append(3)
    db.data["k"]["items"].append(4)
    db.get_all_values()[0]["items"].append(5)
    assert db.fetch("k") == {"items": [1, 2]}
    assert _on_disk(db) == {"k": {"items": [1, 2]}}


@pytest.mark.parametrize("value", [float("nan"), float("inf"), [1, float("-inf")], {"x": float("nan")}])
def test_set_rejects_non_finite_numbers(db, value):
    db.set("ok", 1)
    with pytest.raises(InvalidValue):
        db.set("k", value)
    assert db.has("k") is False
    assert _on_disk(db) == {"ok": 1}


def test_remove(db):
    db.set("a", 1)
    db.set("b", 2)
    db.remove("a")
    db.remove("missing")
    assert db.get_all_keys() == ["b"]
    assert _on_disk(db) == {"b": 2}


def test_delete_each_prefix(db):
    db.set("user_1", 1)
    db.set("user_2", 2)
    db.set("admin", 3)
    db.set("User_3", 4)

    removed = db.delete_each("user_")

    assert removed == 2
    assert db.data == {"admin": 3, "User_3": 4}
    assert _on_disk(db) == {"admin": 3, "User_3": 4}


def test_delete_each_rejects_non_string(db):
    with pytest.raises(InvalidValue):
        db.delete_each(5)


def test_clear_is_idempotent(db):
    db.set("a", 1)
    db.clear()
    once = (db.data.copy(), _on_disk(db))
    db.clear()
    assert (db.data, _on_disk(db)) == once == ({}, {})


def test_destroy_resets_state_and_stays_usable(db):
    db.set("a", 1)
    db.destroy()

    assert db.get_all_keys() == []
    assert not db.path.exists()

    db.set("b", 2)
    assert db.path.exists()
    assert _on_disk(db) == {"b": 2}


def test_destroy_without_file_fails(db):
    db.path.unlink()
    with pytest.raises(DatabaseFileNotFound):
        db.destroy()


def test_keys_and_values_follow_insertion_order(db):
    db.set("z", 1)
    db.set("a", "two")
    db.set("m", [3])
    assert db.get_all_keys() == ["z", "a", "m"]
    assert db.get_all_values() == [1, "two", [3]]


def test_repr_mentions_path(db):
    assert str(db.path) in repr(db)
