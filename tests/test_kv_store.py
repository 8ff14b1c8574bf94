# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskbell.errors import PersistenceError
from taskbell.storage.kv_store import SQLiteKeyValueStore
from taskbell.tasks.task_store import TaskStore


def test_get_set_delete(tmp_path: Path) -> None:
    kv = SQLiteKeyValueStore(tmp_path / "store.sqlite3")

    assert kv.get("k") is None
    kv.set("k", "v1")
    kv.set("k", "v2")
    assert kv.get("k") == "v2"
    kv.delete("k")
    assert kv.get("k") is None
    kv.delete("k")


def test_values_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "store.sqlite3"
    SQLiteKeyValueStore(db).set("scheduledTasks", "[]")
    assert SQLiteKeyValueStore(db).get("scheduledTasks") == "[]"


def test_task_store_survives_restart(tmp_path: Path) -> None:
    db = tmp_path / "store.sqlite3"
    store = TaskStore(SQLiteKeyValueStore(db))
    task = store.add("Study", "2026-03-14", "09:00", alarm_enabled=True)
    store.toggle_complete(task.id)

    reopened = TaskStore(SQLiteKeyValueStore(db))
    assert reopened.list() == store.list()
    assert reopened.get(task.id).completed is True


def test_storage_errors_become_persistence_errors(tmp_path: Path) -> None:
    # A directory where the database file should be cannot be opened by sqlite.
    bad = tmp_path / "store.sqlite3"
    bad.mkdir()
    with pytest.raises(PersistenceError):
        SQLiteKeyValueStore(bad)
