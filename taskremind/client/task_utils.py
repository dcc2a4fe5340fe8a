"""Grouping and summary helpers for task lists.

Every helper accepts ``now`` so results are reproducible; "today" is the
calendar day of ``now`` in its own timezone.
"""

from collections import Counter
from datetime import datetime, time, timezone


def _now(now):
    return now or datetime.now(timezone.utc).astimezone()


def _same_day(moment, now):
    return moment.astimezone(now.tzinfo).date() == now.date()


def todays_tasks(tasks, now=None):
    now = _now(now)
    return [t for t in tasks if _same_day(t.scheduled_time, now)]


def upcoming_tasks(tasks, now=None):
    now = _now(now)
    return [t for t in tasks if t.scheduled_time > now and not _same_day(t.scheduled_time, now)]


def overdue_tasks(tasks, now=None):
    now = _now(now)
    return [
        t for t in tasks
        if t.scheduled_time < now and not t.completed and not _same_day(t.scheduled_time, now)
    ]


def is_overdue(task, now=None):
    return task.scheduled_time < _now(now) and not task.completed


def task_stats(tasks, now=None):
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "overdue": len(overdue_tasks(tasks, now)),
    }


def tasks_in_day_range(tasks, start_day, end_day, tz=None):
    """Tasks from the start of ``start_day`` to the end of ``end_day`` (inclusive)."""
    tz = tz or _now(None).tzinfo
    start = datetime.combine(start_day, time.min, tzinfo=tz)
    end = datetime.combine(end_day, time.max, tzinfo=tz)
    return [t for t in tasks if start <= t.scheduled_time <= end]


def sort_by_scheduled_time(tasks):
    return sorted(tasks, key=lambda t: t.scheduled_time)


def count_by_priority(tasks):
    return dict(Counter(t.priority.value for t in tasks))
