from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, timezone
from enum import Enum
from uuid import uuid4

TITLE_MAX_LENGTH = 100


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# JSON (camelCase) key -> dataclass attribute
JSON_FIELDS = {
    "id": "id",
    "title": "title",
    "scheduledTime": "scheduled_time",
    "priority": "priority",
    "completed": "completed",
    "followUpEnabled": "follow_up_enabled",
    "followUpSent": "follow_up_sent",
}


def new_task_id():
    return str(uuid4())


def _to_utc(parsed):
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("timestamp out of range") from None


def parse_instant(value):
    """Parse an ISO-8601 timestamp that carries a UTC offset (or ``Z``).

    Raises ``ValueError`` for anything else, including naive timestamps.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError("expected an ISO-8601 string")
    if parsed.tzinfo is None:
        raise ValueError("timestamp must include a timezone offset")
    return _to_utc(parsed)


def parse_bound(value):
    """Parse a range bound leniently: dates and naive times are read as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return _to_utc(parsed)


def format_instant(value):
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Task:
    title: str
    scheduled_time: datetime
    priority: Priority = Priority.MEDIUM
    completed: bool = False
    follow_up_enabled: bool = True
    follow_up_sent: bool = False
    id: str = field(default_factory=new_task_id)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "scheduledTime": format_instant(self.scheduled_time),
            "priority": self.priority.value,
            "completed": self.completed,
            "followUpEnabled": self.follow_up_enabled,
            "followUpSent": self.follow_up_sent,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            title=data["title"],
            scheduled_time=parse_instant(data["scheduledTime"]),
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            completed=bool(data.get("completed", False)),
            follow_up_enabled=bool(data.get("followUpEnabled", True)),
            follow_up_sent=bool(data.get("followUpSent", False)),
        )

    def merged(self, changes):
        """Return a copy with ``changes`` (attribute names) applied; ``id`` is kept."""
        allowed = {f.name for f in fields(self)} - {"id"}
        return replace(self, **{k: v for k, v in changes.items() if k in allowed})

    def copy(self):
        return replace(self)


def sort_key(task: Task):
    return task.scheduled_time

