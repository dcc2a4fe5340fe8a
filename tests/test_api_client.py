from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import future_iso

from taskremind.client.api_client import ApiError, TaskApiClient
from taskremind.models.task_model import Priority


@pytest.fixture
def api(live_server):
    return TaskApiClient(live_server, timeout=5)


def test_create_list_update_delete(api):
    created = api.create_task({"title": "Pick up parcel", "scheduledTime": future_iso(2)})

    assert created.priority == Priority.MEDIUM
    assert [t.id for t in api.list_tasks()] == [created.id]
    assert api.get_task(created.id).title == "Pick up parcel"

    updated = api.update_task(created.id, completed=True, follow_up_sent=True)
    assert updated.completed is True
    assert updated.follow_up_sent is True

    api.delete_task(created.id)
    assert api.list_tasks() == []


def test_update_accepts_datetime(api):
    task = api.create_task({"title": "Move me", "scheduledTime": future_iso(1)})
    new_time = datetime(2031, 4, 5, 6, 7, tzinfo=timezone.utc)

    assert api.update_task(task.id, scheduled_time=new_time).scheduled_time == new_time


def test_range_with_dates(api):
    api.create_task({"title": "In range", "scheduledTime": "2031-01-10T08:00:00Z"})
    api.create_task({"title": "Out of range", "scheduledTime": "2031-03-10T08:00:00Z"})

    found = api.tasks_in_range(date(2031, 1, 1), date(2031, 2, 1))
    assert [t.title for t in found] == ["In range"]


def test_validation_errors_surface(api):
    with pytest.raises(ApiError) as exc:
        api.create_task({"title": ""})

    assert exc.value.status_code == 400
    assert exc.value.message == "Invalid task data"
    assert {e["field"] for e in exc.value.errors} == {"title", "scheduledTime"}


def test_not_found(api):
    with pytest.raises(ApiError) as exc:
        api.delete_task("missing")
    assert exc.value.status_code == 404
    assert "Task not found" in str(exc.value)


def test_unreachable_server():
    api = TaskApiClient("http://127.0.0.1:9", timeout=0.5)
    with pytest.raises(ApiError) as exc:
        api.list_tasks()
    assert exc.value.status_code is None


def test_scheduled_time_round_trips(api):
    when = (datetime.now(timezone.utc) + timedelta(days=3)).replace(microsecond=0)
    task = api.create_task({"title": "Round trip", "scheduledTime": when.isoformat()})
    assert task.scheduled_time == when
