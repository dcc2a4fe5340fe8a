from datetime import datetime, timedelta, timezone

from taskremind.models.task_model import Priority
from taskremind.utils.store import EARLIEST, LATEST, TaskStore

BASE = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _fields(title, hours, **extra):
    fields = {"title": title, "scheduled_time": BASE + timedelta(hours=hours)}
    fields.update(extra)
    return fields


def test_create_applies_defaults():
    store = TaskStore()
    task = store.create(_fields("Water plants", 1))

    assert task.id
    assert task.priority == Priority.MEDIUM
    assert task.completed is False
    assert task.follow_up_enabled is True
    assert task.follow_up_sent is False


def test_create_ignores_completed_and_follow_up_sent():
    store = TaskStore()
    task = store.create(_fields("Call mom", 1, completed=True, follow_up_sent=True, priority=Priority.HIGH))

    assert task.completed is False
    assert task.follow_up_sent is False
    assert task.priority == Priority.HIGH


def test_create_assigns_unique_ids():
    store = TaskStore()
    ids = {store.create(_fields(f"t{i}", i)).id for i in range(20)}
    assert len(ids) == 20


def test_get_unknown_returns_none():
    assert TaskStore().get("missing") is None


def test_list_is_ordered_by_scheduled_time():
    store = TaskStore()
    store.create(_fields("late", 5))
    store.create(_fields("early", 1))
    store.create(_fields("middle", 3))

    assert [t.title for t in store.list()] == ["early", "middle", "late"]


def test_update_merges_fields_and_keeps_id():
    store = TaskStore()
    task = store.create(_fields("Pay rent", 2))

    updated = store.update(task.id, {"completed": True, "id": "hijack"})

    assert updated.id == task.id
    assert updated.completed is True
    assert updated.title == "Pay rent"
    assert store.get(task.id).completed is True
    assert store.get("hijack") is None


def test_update_unknown_id_never_creates():
    store = TaskStore()
    assert store.update("nope", {"title": "x"}) is None
    assert len(store) == 0


def test_delete_reports_removal():
    store = TaskStore()
    task = store.create(_fields("Stretch", 1))

    assert store.delete(task.id) is True
    assert store.delete(task.id) is False
    assert store.get(task.id) is None


def test_returned_tasks_are_copies():
    store = TaskStore()
    task = store.create(_fields("Read", 1))
    task.title = "changed"

    assert store.get(task.id).title == "Read"


def test_list_in_range_is_inclusive_and_ordered():
    store = TaskStore()
    store.create(_fields("before", -1))
    store.create(_fields("end", 4))
    store.create(_fields("start", 0))
    store.create(_fields("inside", 2))
    store.create(_fields("after", 5))

    found = store.list_in_range(BASE, BASE + timedelta(hours=4))

    assert [t.title for t in found] == ["start", "inside", "end"]


def test_unbounded_range_matches_list():
    store = TaskStore()
    for i in (3, -2, 7, 0):
        store.create(_fields(f"t{i}", i))

    assert store.list_in_range(EARLIEST, LATEST) == store.list()
