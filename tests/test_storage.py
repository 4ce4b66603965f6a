# tests/test_storage.py

from __future__ import annotations

import json
import logging

import pytest

from config import StoreConfig
from models import DONE, IN_PROGRESS, TODO
from storage import (
    CorruptStoreError,
    InvalidStatusError,
    StoreWriteError,
    TaskNotFoundError,
    TaskStore,
)

from .fakes import record, write_records


def test_add_to_empty_store_assigns_id_1(store, tasks_file) -> None:
    assert store.add("buy milk") == 1

    data = json.loads(tasks_file.read_text(encoding="utf-8"))
    assert len(data) == 1
    assert data[0]["id"] == 1
    assert data[0]["description"] == "buy milk"
    assert data[0]["status"] == "todo"
    assert data[0]["createdAt"] == data[0]["updatedAt"]
    assert data[0]["createdAt"] == "2024-01-01T09:00:00.000Z"


def test_add_uses_max_id_plus_one(store, tasks_file) -> None:
    write_records(tasks_file, [record(7), record(2)])

    assert store.add("next") == 8
    assert [t.id for t in store.list()] == [7, 2, 8]


def test_deleted_ids_below_max_are_not_reused(store) -> None:
    for name in ("a", "b", "c"):
        store.add(name)
    store.delete(2)

    assert store.add("d") == 4
    assert [t.id for t in store.list()] == [1, 3, 4]


def test_add_rejects_blank_description(store, tasks_file) -> None:
    with pytest.raises(ValueError):
        store.add("   ")
    assert not tasks_file.exists()


def test_update_refreshes_updated_at_only(store) -> None:
    task_id = store.add("draft")
    store.set_status(task_id, IN_PROGRESS)
    before = store.list()[0]

    updated = store.update(task_id, "final")

    assert updated.description == "final"
    assert updated.status == IN_PROGRESS
    assert updated.created_at == before.created_at
    assert updated.updated_at > before.updated_at
    assert store.list()[0] == updated


def test_set_status_marks_done(store) -> None:
    task_id = store.add("ship it")
    created = store.list()[0]

    store.set_status(task_id, DONE)

    task = store.list()[0]
    assert task.status == DONE
    assert task.created_at == created.created_at
    assert task.updated_at > created.updated_at


def test_set_status_rejects_unknown_status(store, tasks_file) -> None:
    store.add("x")
    before = tasks_file.read_bytes()

    with pytest.raises(InvalidStatusError):
        store.set_status(1, "blocked")
    assert tasks_file.read_bytes() == before


@pytest.mark.parametrize(
    "operation",
    [
        lambda s: s.update(99, "nope"),
        lambda s: s.delete(99),
        lambda s: s.set_status(99, DONE),
    ],
    ids=["update", "delete", "set_status"],
)
def test_missing_id_leaves_file_untouched(store, tasks_file, operation) -> None:
    store.add("one")
    store.add("two")
    before = tasks_file.read_bytes()

    with pytest.raises(TaskNotFoundError) as excinfo:
        operation(store)

    assert excinfo.value.task_id == 99
    assert str(excinfo.value) == "Task 99 not found"
    assert tasks_file.read_bytes() == before


def test_delete_preserves_order_of_remaining(store) -> None:
    for name in ("a", "b", "c"):
        store.add(name)

    removed = store.delete(2)

    assert removed.description == "b"
    assert [t.id for t in store.list()] == [1, 3]


def test_list_filters_by_status_in_stored_order(store, tasks_file) -> None:
    write_records(
        tasks_file,
        [record(1, status=DONE), record(2), record(3, status=DONE), record(4, status=IN_PROGRESS)],
    )

    assert [t.id for t in store.list(DONE)] == [1, 3]
    assert [t.id for t in store.list(TODO)] == [2]
    assert [t.id for t in store.list()] == [1, 2, 3, 4]


def test_list_does_not_write(store, tasks_file) -> None:
    store.list()
    assert not tasks_file.exists()


def test_list_rejects_unknown_status(store) -> None:
    with pytest.raises(InvalidStatusError) as excinfo:
        store.list("later")
    assert str(excinfo.value) == "Invalid status. Use: todo, in-progress, or done"


def test_save_load_round_trip_is_byte_stable(store, tasks_file) -> None:
    store.add("first")
    store.add("zweite Aufgabe ✓")
    store.set_status(1, DONE)
    before = tasks_file.read_bytes()

    store.save(store.load())

    assert tasks_file.read_bytes() == before


def test_load_missing_or_blank_file_is_empty(store, tasks_file) -> None:
    assert store.load() == []
    tasks_file.write_text("  \n\t", encoding="utf-8")
    assert store.load() == []


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"id": 1}',
        '[{"id": 1, "description": "x"}]',
        '[{"id": "1", "description": "x", "status": "todo", "createdAt": "a", "updatedAt": "a"}]',
        '[{"id": 1, "description": "x", "status": "later", "createdAt": "a", "updatedAt": "a"}]',
    ],
    ids=["syntax", "not-a-list", "missing-fields", "string-id", "bad-status"],
)
def test_corrupt_store_fails_open_with_warning(store, tasks_file, caplog, content) -> None:
    tasks_file.write_text(content, encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert store.load() == []

    assert any("treating it as empty" in r.getMessage() for r in caplog.records)
    assert tasks_file.read_text(encoding="utf-8") == content


def test_duplicate_ids_are_treated_as_corrupt(store, tasks_file) -> None:
    write_records(tasks_file, [record(1), record(1)])
    assert store.load() == []


def test_strict_store_raises_on_corrupt_file(tasks_file, clock) -> None:
    tasks_file.write_text("[{", encoding="utf-8")
    strict = TaskStore(StoreConfig(path=tasks_file, strict=True), clock=clock)

    with pytest.raises(CorruptStoreError) as excinfo:
        strict.add("would clobber")

    assert excinfo.value.path == tasks_file
    assert tasks_file.read_text(encoding="utf-8") == "[{"


def test_save_creates_missing_directory(tmp_path, clock) -> None:
    path = tmp_path / "nested" / "dir" / "tasks.json"
    nested = TaskStore(StoreConfig(path=path), clock=clock)

    assert nested.add("hello") == 1
    assert json.loads(path.read_text(encoding="utf-8"))[0]["description"] == "hello"


def test_save_failure_raises_store_write_error(tmp_path, clock, caplog) -> None:
    path = tmp_path / "tasks.json"
    path.mkdir()
    broken = TaskStore(StoreConfig(path=path), clock=clock)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(StoreWriteError) as excinfo:
            broken.save([])

    assert str(excinfo.value).startswith("Critical error: could not save tasks")
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def _undecodable(path) -> None:
    path.write_bytes(b"[\xff\xfe]")


def _directory(path) -> None:
    path.mkdir()


@pytest.mark.parametrize("make_unreadable", [_undecodable, _directory], ids=["non-utf8", "directory"])
def test_unreadable_store_fails_open_with_warning(store, tasks_file, caplog, make_unreadable) -> None:
    make_unreadable(tasks_file)

    with caplog.at_level(logging.WARNING):
        assert store.load() == []

    assert any("treating it as empty" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("make_unreadable", [_undecodable, _directory], ids=["non-utf8", "directory"])
def test_strict_store_raises_on_unreadable_file(tasks_file, clock, make_unreadable) -> None:
    make_unreadable(tasks_file)
    strict = TaskStore(StoreConfig(path=tasks_file, strict=True), clock=clock)

    with pytest.raises(CorruptStoreError):
        strict.list()
