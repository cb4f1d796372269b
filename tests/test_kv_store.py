# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from task_generator.storage.kv_store import JsonFileKVStore
from task_generator.tasks.task_store import TaskStore

from .fakes import make_task


def test_file_store_save_load(tmp_path: Path) -> None:
    kv = JsonFileKVStore(tmp_path / "data")

    assert kv.load("ai-tasks") is None
    kv.save("ai-tasks", "[]")
    kv.save("dark-mode", "true")

    assert kv.load("ai-tasks") == "[]"
    assert kv.load("dark-mode") == "true"
    assert not list((tmp_path / "data").glob("*.tmp"))


def test_file_store_rejects_path_like_keys(tmp_path: Path) -> None:
    kv = JsonFileKVStore(tmp_path)
    with pytest.raises(ValueError):
        kv.save("../escape", "x")


def test_task_store_survives_restart(tmp_path: Path) -> None:
    store = TaskStore(JsonFileKVStore(tmp_path))
    store.append([make_task("1", "One"), make_task("2", "Two")])
    store.update("2", completed=True)

    restarted = TaskStore(JsonFileKVStore(tmp_path))
    assert restarted.tasks == store.tasks
