import logging
from datetime import date, datetime

import requests

from taskremind.models.task_model import JSON_FIELDS, Task, format_instant

logger = logging.getLogger(__name__)

# Task attribute -> JSON key
_ATTRIBUTE_KEYS = {attr: key for key, attr in JSON_FIELDS.items()}


class ApiError(Exception):
    """A request to the task API failed (non-2xx answer or transport error)."""

    def __init__(self, message, status_code=None, errors=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = list(errors or [])

    def __str__(self):
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


def _json_value(value):
    if isinstance(value, datetime):
        return format_instant(value)
    if hasattr(value, "value"):
        return value.value
    return value


def _format_bound(value):
    if isinstance(value, datetime):
        return format_instant(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class TaskApiClient:
    def __init__(self, base_url, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}/api/tasks{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"Could not reach task API: {exc}") from exc

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise ApiError(
                body.get("message") or resp.reason or "Request failed",
                status_code=resp.status_code,
                errors=body.get("errors"),
            )
        return resp

    def list_tasks(self):
        return [Task.from_dict(d) for d in self._request("GET", "").json()]

    def get_task(self, task_id):
        return Task.from_dict(self._request("GET", f"/{task_id}").json())

    def create_task(self, payload):
        return Task.from_dict(self._request("POST", "", json=payload).json())

    def update_task(self, task_id, **changes):
        body = {_ATTRIBUTE_KEYS.get(k, k): _json_value(v) for k, v in changes.items()}
        return Task.from_dict(self._request("PATCH", f"/{task_id}", json=body).json())

    def delete_task(self, task_id):
        self._request("DELETE", f"/{task_id}")

    def tasks_in_range(self, start, end):
        path = f"/range/{_format_bound(start)}/{_format_bound(end)}"
        return [Task.from_dict(d) for d in self._request("GET", path).json()]
