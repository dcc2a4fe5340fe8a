"""Client-side reminder scheduler.

For every incomplete task due in the future the scheduler arms a one-shot
"main" timer. When it fires, a reminder notification is shown and, if the
task wants one, a second "follow-up" timer is armed one hour later.

There is at most one armed timer per (task id, timer kind). Scheduling a task
always cancels whatever was armed for it before, which is how edits to the
scheduled time take effect when the task list is refreshed.

Timers are process local: nothing survives a restart, callers re-arm by
calling ``sync`` with a fresh task list.
"""

import logging
import threading
from datetime import datetime, timedelta, timezone
from enum import Enum

logger = logging.getLogger(__name__)

FOLLOW_UP_DELAY = timedelta(hours=1)


class TimerKind(str, Enum):
    MAIN = "main"
    FOLLOW_UP = "follow_up"


def thread_timer(seconds, callback):
    """Default timer factory: a daemon ``threading.Timer`` (not yet started)."""
    timer = threading.Timer(seconds, callback)
    timer.daemon = True
    return timer


def utc_now():
    return datetime.now(timezone.utc)


class ReminderScheduler:
    """Arms, replaces and cancels reminder timers keyed by task id.

    ``timer_factory(seconds, callback)`` must return an object with ``start()``
    and ``cancel()``; ``clock()`` must return an aware datetime. Both exist so
    tests can drive time by hand.
    """

    def __init__(self, notifier, timer_factory=thread_timer, clock=utc_now,
                 on_follow_up_sent=None, follow_up_delay=FOLLOW_UP_DELAY):
        self.notifier = notifier
        self.timer_factory = timer_factory
        self.clock = clock
        self.on_follow_up_sent = on_follow_up_sent
        self.follow_up_delay = follow_up_delay
        # (task_id, TimerKind) -> (handle, token)
        self._timers = {}
        self._lock = threading.Lock()

    def schedule(self, task):
        """Arm the main reminder for ``task``; returns True if a timer was armed."""
        if task.completed:
            return False

        with self._lock:
            self._discard(task.id, TimerKind.MAIN)
            self._discard(task.id, TimerKind.FOLLOW_UP)

            delay = (task.scheduled_time - self.clock()).total_seconds()
            if delay <= 0:
                return False

            self._arm(task, TimerKind.MAIN, delay, self._fire_main)

        logger.debug("Armed reminder for task %s in %.1fs", task.id, delay)
        return True

    def cancel(self, task_id):
        with self._lock:
            self._discard(task_id, TimerKind.MAIN)
            self._discard(task_id, TimerKind.FOLLOW_UP)

    def cancel_all(self):
        with self._lock:
            for handle, _ in self._timers.values():
                handle.cancel()
            count = len(self._timers)
            self._timers.clear()
        if count:
            logger.debug("Cancelled %d pending timer(s)", count)

    def sync(self, tasks):
        """Re-arm timers from a freshly fetched task list.

        Tasks that vanished from the list or were completed lose their timers,
        future tasks are rescheduled. Tasks already due are left alone so a
        pending follow-up survives the refresh.
        """
        current = {t.id for t in tasks}
        with self._lock:
            stale = {task_id for task_id, _ in self._timers if task_id not in current}
        for task_id in stale:
            self.cancel(task_id)

        now = self.clock()
        armed = 0
        for task in tasks:
            if task.completed:
                self.cancel(task.id)
            elif task.scheduled_time > now and self.schedule(task):
                armed += 1
        return armed

    def pending(self, task_id=None):
        """Return the armed (task_id, kind) pairs, optionally for a single task."""
        with self._lock:
            keys = list(self._timers)
        if task_id is not None:
            keys = [k for k in keys if k[0] == task_id]
        return sorted(keys, key=lambda k: (k[0], k[1].value))

    # Internals. The _arm/_discard helpers expect the lock to be held.

    def _arm(self, task, kind, delay, fire):
        token = object()
        handle = self.timer_factory(delay, lambda: fire(task, token))
        self._timers[(task.id, kind)] = (handle, token)
        handle.start()

    def _discard(self, task_id, kind):
        entry = self._timers.pop((task_id, kind), None)
        if entry is not None:
            entry[0].cancel()

    def _claim(self, task_id, kind, token):
        """Remove the timer entry if ``token`` is still the armed one."""
        with self._lock:
            entry = self._timers.get((task_id, kind))
            if entry is None or entry[1] is not token:
                return False
            del self._timers[(task_id, kind)]
            return True

    def _emit(self, task, is_follow_up):
        try:
            return self.notifier.show_task_reminder(task.title, is_follow_up=is_follow_up)
        except Exception:
            logger.exception("Reminder notification failed for task %s", task.id)
            return False

    def _fire_main(self, task, token):
        if not self._claim(task.id, TimerKind.MAIN, token):
            return

        self._emit(task, is_follow_up=False)

        if task.follow_up_enabled and not task.follow_up_sent:
            with self._lock:
                self._discard(task.id, TimerKind.FOLLOW_UP)
                self._arm(task, TimerKind.FOLLOW_UP, self.follow_up_delay.total_seconds(),
                          self._fire_follow_up)

    def _fire_follow_up(self, task, token):
        if not self._claim(task.id, TimerKind.FOLLOW_UP, token):
            return

        self._emit(task, is_follow_up=True)

        if self.on_follow_up_sent is not None:
            try:
                self.on_follow_up_sent(task.id)
            except Exception:
                logger.exception("Could not record follow-up for task %s", task.id)
