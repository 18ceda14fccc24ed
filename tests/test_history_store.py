"""Tests for both history backends."""

import time

import pytest

from conftest import make_mandalart


@pytest.fixture(params=["local", "sqlite"])
def store_and_users(request, db_path):
    """A history store and two user ids that exist in it."""
    if request.param == "local":
        from mandalart.storage.history import LocalHistoryStore
        from mandalart.storage.kv import MemoryStore

        return LocalHistoryStore(MemoryStore()), "u1", "u2"

    from mandalart.db.mandalarts import MandalartRepository
    from mandalart.db.users import UserRepository

    users = UserRepository(db_path)
    u1 = users.create(email="one@example.com", name="one")["id"]
    u2 = users.create(email="two@example.com", name="two")["id"]
    return MandalartRepository(db_path), u1, u2


def test_create_assigns_id_and_timestamp(store_and_users):
    store, u1, _ = store_and_users
    before = int(time.time() * 1000)

    item = store.create(u1, make_mandalart())

    assert item.id
    assert item.user_id == u1
    assert item.timestamp >= before - 1000
    assert store.get(item.id).data == make_mandalart()


def test_list_is_newest_first_and_per_user(store_and_users):
    store, u1, u2 = store_and_users
    first = store.create(u1, make_mandalart("First"))
    second = store.create(u1, make_mandalart("Second"))
    store.create(u2, make_mandalart("Other"))

    items = store.list(u1)

    assert [i.id for i in items] == [second.id, first.id]
    assert [i.data.main_goal for i in store.list(u2)] == ["Other"]


def test_update_persists_checklist_state(store_and_users):
    store, u1, _ = store_and_users
    data = make_mandalart()
    item = store.create(u1, data)

    data.task(0, 0).checklist[1].checked = True
    store.update(item.id, data, user_id=u1)

    stored = store.get(item.id).data.task(0, 0)
    assert stored.checklist[1].checked
    assert stored.checklist[1].id == "i-0-0-1"


def test_update_unknown_or_foreign_item_is_noop(store_and_users):
    store, u1, u2 = store_and_users
    item = store.create(u1, make_mandalart("Mine"))

    store.update("missing", make_mandalart("X"))
    store.update(item.id, make_mandalart("Stolen"), user_id=u2)

    assert store.get(item.id).data.main_goal == "Mine"


def test_delete_is_idempotent_and_scoped(store_and_users):
    store, u1, u2 = store_and_users
    item = store.create(u1, make_mandalart())

    store.delete(item.id, user_id=u2)
    assert store.get(item.id) is not None

    store.delete(item.id, user_id=u1)
    store.delete(item.id, user_id=u1)
    assert store.get(item.id) is None


def test_clear_removes_only_that_users_items(store_and_users):
    store, u1, u2 = store_and_users
    store.create(u1, make_mandalart("a"))
    store.create(u1, make_mandalart("b"))
    store.create(u2, make_mandalart("c"))

    assert store.clear(u1) == 2
    assert store.list(u1) == []
    assert len(store.list(u2)) == 1


def test_local_store_keeps_legacy_string_tasks():
    from mandalart.storage.history import HISTORY_KEY, LocalHistoryStore
    from mandalart.storage.kv import MemoryStore

    kv = MemoryStore({HISTORY_KEY: [{
        "id": "old",
        "userId": "u1",
        "timestamp": 1,
        "data": {"mainGoal": "g", "subGoals": [{"title": "s", "tasks": ["plain task"]}]},
    }]})

    task = LocalHistoryStore(kv).get("old").data.task(0, 0)
    assert task.title == "plain task"
    assert len(task.checklist) == 3


def test_sqlite_store_wraps_database_errors(tmp_path):
    from mandalart.db.mandalarts import MandalartRepository
    from mandalart.errors import PersistenceError

    # No migrations: the table does not exist
    repo = MandalartRepository(tmp_path / "empty.db")

    with pytest.raises(PersistenceError) as exc:
        repo.create("u1", make_mandalart())
    assert exc.value.operation == "create"


def test_sqlite_store_rejects_unknown_user(db_path):
    from mandalart.db.mandalarts import MandalartRepository
    from mandalart.errors import PersistenceError

    with pytest.raises(PersistenceError):
        MandalartRepository(db_path).create("nobody", make_mandalart())
