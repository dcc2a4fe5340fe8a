class TaskError(Exception):
    """Base class for task related failures."""

    status_code = 500

    def __init__(self, message="Internal Server Error"):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"message": self.message}


class ValidationError(TaskError):
    """A payload or query parameter failed validation.

    ``errors`` is a list of ``{"field": ..., "message": ...}`` entries, one per
    offending field.
    """

    status_code = 400

    def __init__(self, message="Invalid task data", errors=None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_dict(self):
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class TaskNotFound(TaskError):
    status_code = 404

    def __init__(self, task_id):
        super().__init__("Task not found")
        self.task_id = task_id
