from datetime import date, datetime, time, timezone

from taskremind.errors import ValidationError
from taskremind.models.task_model import TITLE_MAX_LENGTH, Priority, format_instant


def build_task_payload(title, date_text, time_text, priority="medium",
                       follow_up_enabled=True, now=None, tz=None):
    """Validate the task creation form and build the POST body.

    ``date_text`` is ``YYYY-MM-DD`` and ``time_text`` is ``HH:MM``, both read in
    ``tz`` (the local zone when None). The combined instant must lie after
    ``now``. Raises ValidationError listing every bad field, before anything is
    sent to the server.
    """
    errors = []

    title = (title or "").strip()
    if not title:
        errors.append({"field": "title", "message": "Task title is required"})
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append({"field": "title", "message": f"Title must be at most {TITLE_MAX_LENGTH} characters"})

    day = clock = None
    if not date_text:
        errors.append({"field": "date", "message": "Date is required"})
    else:
        try:
            day = date.fromisoformat(date_text)
        except ValueError:
            errors.append({"field": "date", "message": "Use YYYY-MM-DD"})
    if not time_text:
        errors.append({"field": "time", "message": "Time is required"})
    else:
        try:
            clock = time.fromisoformat(time_text)
        except ValueError:
            errors.append({"field": "time", "message": "Use HH:MM"})

    if priority not in [p.value for p in Priority]:
        errors.append({"field": "priority", "message": "Choose low, medium or high"})

    if day is not None and clock is not None:
        scheduled = datetime.combine(day, clock)
        scheduled = scheduled.replace(tzinfo=tz) if tz is not None else scheduled.astimezone()
        now = now or datetime.now(timezone.utc)
        if scheduled <= now:
            errors.append({"field": "time", "message": "Please select a future date and time"})

    if errors:
        raise ValidationError("Invalid task data", errors)

    return {
        "title": title,
        "scheduledTime": format_instant(scheduled),
        "priority": priority,
        "followUpEnabled": bool(follow_up_enabled),
    }