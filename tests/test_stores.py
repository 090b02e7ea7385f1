# tests/test_stores.py

from __future__ import annotations

from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from dayplanner.core.errors import UsernameTakenError
from dayplanner.storage.task_store import TaskStore
from dayplanner.storage.user_store import UserStore


def test_user_create_and_lookup(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "db.sqlite3")

    u = store.create_user("alice", "hash-a")
    assert u.id > 0
    assert store.get_by_username("alice") == u
    assert store.get_by_id(u.id) == u
    assert store.get_by_username("nobody") is None
    assert u.public().to_json() == {"id": u.id, "username": "alice"}


def test_duplicate_username_writes_nothing(tmp_path: Path) -> None:
    store = UserStore(tmp_path / "db.sqlite3")
    store.create_user("alice", "hash-a")

    with pytest.raises(UsernameTakenError):
        store.create_user("alice", "hash-b")

    assert store.count_users() == 1
    assert store.get_by_username("alice").password_hash == "hash-a"


def test_task_add_list_is_scoped_by_user(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "db.sqlite3")
    remind = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)

    t1 = store.add_task(user_id=1, title="  buy milk ", created_at=date(2024, 5, 1), remind_on=remind)
    store.add_task(user_id=2, title="other user's task", created_at=date(2024, 5, 1))

    assert t1.title == "buy milk"
    assert t1.remind_on == remind
    assert t1.user_id == 1
    assert [t.id for t in store.list_tasks(1)] == [t1.id]
    assert [t.title for t in store.list_tasks(2)] == ["other user's task"]


def test_task_partial_update_and_clear_reminder(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "db.sqlite3")
    t = store.add_task(
        user_id=1,
        title="call mom",
        created_at=date(2024, 5, 1),
        remind_on=datetime(2024, 5, 1, 18, 0, tzinfo=UTC),
    )

    updated = store.update_task(t.id, 1, is_completed=True)
    assert updated is not None
    assert updated.is_completed is True
    assert updated.remind_on == t.remind_on  # untouched
    assert updated.title == "call mom"

    cleared = store.update_task(t.id, 1, remind_on=None)
    assert cleared is not None
    assert cleared.remind_on is None
    assert cleared.is_completed is True


def test_task_update_and_delete_of_foreign_task_do_nothing(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "db.sqlite3")
    t = store.add_task(user_id=1, title="mine", created_at=date(2024, 5, 1))

    assert store.update_task(t.id, 2, title="hijacked") is None
    assert store.delete_task(t.id, 2) is False
    assert [x.title for x in store.list_tasks(1)] == ["mine"]

    assert store.delete_task(t.id, 1) is True
    assert store.list_tasks(1) == []
    assert store.delete_task(t.id, 1) is False


def test_task_requires_title(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "db.sqlite3")
    with pytest.raises(ValueError):
        store.add_task(user_id=1, title="   ", created_at=date(2024, 5, 1))


def test_stores_share_one_file(tmp_path: Path) -> None:
    db = tmp_path / "db.sqlite3"
    users = UserStore(db)
    tasks = TaskStore(db)

    u = users.create_user("bob", "h")
    tasks.add_task(user_id=u.id, title="x", created_at=date(2024, 1, 2))

    # Reopening picks up existing data (schema creation is idempotent).
    assert TaskStore(db).count_tasks() == 1
    assert UserStore(db).count_users() == 1
