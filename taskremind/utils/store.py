import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from flask import current_app

from taskremind.models.task_model import Priority, Task, sort_key

EXTENSION_KEY = "taskremind.store"


class TaskStore:
    """In-memory Task records keyed by id.

    Every operation takes the store lock for its whole duration, so each one is
    atomic with respect to the others. Callers always receive copies.
    """

    def __init__(self):
        self._tasks: Dict[str, Task] = {}
        self._lock = threading.Lock()

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return task.copy() if task else None

    def list(self) -> List[Task]:
        with self._lock:
            tasks = [t.copy() for t in self._tasks.values()]
        return sorted(tasks, key=sort_key)

    def create(self, fields: dict) -> Task:
        task = Task(
            title=fields["title"],
            scheduled_time=fields["scheduled_time"],
            priority=fields.get("priority") or Priority.MEDIUM,
            follow_up_enabled=fields.get("follow_up_enabled", True),
            completed=False,
            follow_up_sent=False,
        )
        with self._lock:
            self._tasks[task.id] = task
            return task.copy()

    def update(self, task_id: str, changes: dict) -> Optional[Task]:
        with self._lock:
            existing = self._tasks.get(task_id)
            if existing is None:
                return None
            updated = existing.merged(changes)
            self._tasks[task_id] = updated
            return updated.copy()

    def delete(self, task_id: str) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None

    def list_in_range(self, start: datetime, end: datetime) -> List[Task]:
        with self._lock:
            tasks = [t.copy() for t in self._tasks.values() if start <= t.scheduled_time <= end]
        return sorted(tasks, key=sort_key)

    def clear(self) -> None:
        with self._lock:
            self._tasks.clear()

    def __len__(self):
        with self._lock:
            return len(self._tasks)


# Widest aware bounds, for callers that want an unbounded range query
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
LATEST = datetime.max.replace(tzinfo=timezone.utc)


def get_store() -> TaskStore:
    """Return the TaskStore attached to the current application."""
    return current_app.extensions[EXTENSION_KEY]


def init_app(app, store: Optional[TaskStore] = None):
    app.extensions[EXTENSION_KEY] = store if store is not None else TaskStore()
    app.logger.debug("Task store attached: %s", type(app.extensions[EXTENSION_KEY]).__name__)
