"""Notification capability used by the reminder scheduler.

A notifier has a three-state permission (``default``, ``granted``,
``denied``). ``notify`` only delivers when permission is granted and reports
suppression by returning False, so callers never need to check first.
"""

import logging
import sys
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class Permission(str, Enum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


REMINDER_TITLE = "Task Reminder"
FOLLOW_UP_TITLE = "Task Follow-up"


def reminder_text(task_title, is_follow_up=False):
    """Return the (title, body) pair for a reminder or its follow-up."""
    if is_follow_up:
        return FOLLOW_UP_TITLE, f"Still pending: {task_title}"
    return REMINDER_TITLE, f"Time to complete: {task_title}"


class Notifier(ABC):
    """Abstract base class for notification backends."""

    def __init__(self, permission=Permission.DEFAULT):
        self.permission = Permission(permission)

    @abstractmethod
    def request_permission(self):
        """Ask the user for permission and return the new Permission."""

    @abstractmethod
    def deliver(self, title, body, options):
        """Show one notification. Only called when permission is granted."""

    def notify(self, title, body="", **options):
        if self.permission != Permission.GRANTED:
            logger.debug("Notification suppressed (permission=%s): %s", self.permission.value, title)
            return False
        try:
            self.deliver(title, body, options)
        except Exception:
            logger.exception("Failed to show notification: %s", title)
            return False
        return True

    def show_task_reminder(self, task_title, is_follow_up=False):
        title, body = reminder_text(task_title, is_follow_up)
        return self.notify(
            title,
            body,
            tag=f"task-reminder-{int(datetime.now().timestamp() * 1000)}",
            require_interaction=True,
        )


class ConsoleNotifier(Notifier):
    """Writes notifications to a text stream; asks for permission with ``prompt``."""

    def __init__(self, permission=Permission.DEFAULT, stream=None, prompt=input):
        super().__init__(permission)
        self.stream = stream or sys.stdout
        self.prompt = prompt

    def request_permission(self):
        try:
            answer = self.prompt("Enable task reminder notifications? [y/N] ")
        except EOFError:
            answer = ""
        granted = answer.strip().lower() in {"y", "yes"}
        self.permission = Permission.GRANTED if granted else Permission.DENIED
        logger.info("Notification permission %s", self.permission.value)
        return self.permission

    def deliver(self, title, body, options):
        stamp = datetime.now().strftime("%H:%M")
        self.stream.write(f"\a[{stamp}] {title}: {body}\n")
        self.stream.flush()
