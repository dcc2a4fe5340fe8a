"""Server-side validation of Task payloads.

Creation payloads must carry a title and an ISO-8601 ``scheduledTime`` with a
UTC offset; ``priority`` and ``followUpEnabled`` fall back to their defaults.
Update payloads are partial: only the keys present are checked.
"""

from taskremind.errors import ValidationError
from taskremind.models.task_model import JSON_FIELDS, Priority, parse_instant

PRIORITY_VALUES = [p.value for p in Priority]


def _error(field, message):
    return {"field": field, "message": message}


def _check_title(value, errors):
    if not isinstance(value, str) or not value.strip():
        errors.append(_error("title", "Title is required"))
        return None
    return value.strip()


def _check_scheduled_time(value, errors):
    try:
        return parse_instant(value)
    except (TypeError, ValueError):
        errors.append(_error("scheduledTime", "Expected an ISO-8601 datetime with offset"))
        return None


def _check_priority(value, errors):
    if value not in PRIORITY_VALUES:
        errors.append(_error("priority", f"Expected one of {', '.join(PRIORITY_VALUES)}"))
        return None
    return Priority(value)


def _check_bool(field, value, errors):
    if not isinstance(value, bool):
        errors.append(_error(field, "Expected a boolean"))
        return None
    return value


def validate_create(payload):
    """Return Task attribute values for a creation payload or raise ValidationError."""
    if not isinstance(payload, dict):
        raise ValidationError(errors=[_error("body", "Expected a JSON object")])

    errors = []
    fields = {
        "title": _check_title(payload.get("title"), errors),
        "scheduled_time": _check_scheduled_time(payload.get("scheduledTime"), errors),
        "priority": Priority.MEDIUM,
        "follow_up_enabled": True,
    }
    if payload.get("priority") is not None:
        fields["priority"] = _check_priority(payload["priority"], errors)
    if payload.get("followUpEnabled") is not None:
        fields["follow_up_enabled"] = _check_bool("followUpEnabled", payload["followUpEnabled"], errors)

    if errors:
        raise ValidationError(errors=errors)
    return fields


def validate_update(payload):
    """Return the attribute changes carried by a partial update payload.

    Unknown keys and ``id`` are dropped silently.
    """
    if not isinstance(payload, dict):
        raise ValidationError(errors=[_error("body", "Expected a JSON object")])

    errors = []
    changes = {}
    for key, value in payload.items():
        name = JSON_FIELDS.get(key)
        if name is None or name == "id":
            continue
        if name == "title":
            changes[name] = _check_title(value, errors)
        elif name == "scheduled_time":
            changes[name] = _check_scheduled_time(value, errors)
        elif name == "priority":
            changes[name] = _check_priority(value, errors)
        else:
            changes[name] = _check_bool(key, value, errors)

    if errors:
        raise ValidationError(errors=errors)
    return changes
