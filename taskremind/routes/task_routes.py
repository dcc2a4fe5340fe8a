from flask import Blueprint, current_app, jsonify, request

from taskremind.errors import TaskNotFound, ValidationError
from taskremind.models.task_model import parse_bound
from taskremind.models.validation import validate_create, validate_update
from taskremind.utils.store import get_store


tasks_bp = Blueprint("tasks", __name__)


def _serialize(tasks):
    return [t.to_dict() for t in tasks]


@tasks_bp.get("")
def list_tasks():
    return jsonify(_serialize(get_store().list())), 200


@tasks_bp.get("/<task_id>")
def get_task(task_id):
    task = get_store().get(task_id)
    if task is None:
        raise TaskNotFound(task_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.post("")
def create_task():
    payload = request.get_json(silent=True)
    fields = validate_create(payload)
    task = get_store().create(fields)
    current_app.logger.info("Created task %s scheduled for %s", task.id, task.scheduled_time.isoformat())
    return jsonify(task.to_dict()), 201


@tasks_bp.patch("/<task_id>")
def update_task(task_id):
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    changes = validate_update(payload)
    task = get_store().update(task_id, changes)
    if task is None:
        raise TaskNotFound(task_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.delete("/<task_id>")
def delete_task(task_id):
    if not get_store().delete(task_id):
        raise TaskNotFound(task_id)
    current_app.logger.info("Deleted task %s", task_id)
    return "", 204


@tasks_bp.get("/range/<start_date>/<end_date>")
def tasks_in_range(start_date, end_date):
    try:
        start = parse_bound(start_date)
        end = parse_bound(end_date)
    except ValueError:
        raise ValidationError("Invalid date format")
    return jsonify(_serialize(get_store().list_in_range(start, end))), 200
