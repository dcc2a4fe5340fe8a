import argparse
import logging
import sys
import time
from datetime import datetime, timezone
from typing import List, Optional

from taskremind.client.api_client import ApiError, TaskApiClient
from taskremind.client.forms import build_task_payload
from taskremind.client.notifications import ConsoleNotifier, Permission
from taskremind.client.scheduler import ReminderScheduler
from taskremind.client.task_utils import is_overdue, overdue_tasks, task_stats, todays_tasks, upcoming_tasks
from taskremind.config import ClientConfig, Config
from taskremind.errors import ValidationError
from taskremind.logging_setup import setup_logging

logger = logging.getLogger(__name__)

PRIORITY_MARK = {"low": " ", "medium": "!", "high": "!!"}


def _client(ns: argparse.Namespace) -> TaskApiClient:
    return TaskApiClient(ns.api_url, timeout=ClientConfig.REQUEST_TIMEOUT)


def _notice(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _print_group(heading: str, tasks, now: datetime) -> None:
    print(f"{heading} ({len(tasks)})")
    if not tasks:
        print("  -")
        return
    for t in tasks:
        box = "[x]" if t.completed else "[ ]"
        when = t.scheduled_time.astimezone(now.tzinfo).strftime("%Y-%m-%d %H:%M")
        flag = " overdue" if is_overdue(t, now) else ""
        print(f"  {box} {when}  {PRIORITY_MARK[t.priority.value]:<2} {t.title}  ({t.id}){flag}")


def cmd_list(ns: argparse.Namespace) -> int:
    try:
        tasks = _client(ns).list_tasks()
    except ApiError as exc:
        _notice(f"Failed to fetch tasks: {exc}")
        return 1

    now = datetime.now(timezone.utc).astimezone()
    _print_group("Today", todays_tasks(tasks, now), now)
    _print_group("Upcoming", upcoming_tasks(tasks, now), now)
    overdue = overdue_tasks(tasks, now)
    if overdue:
        _print_group("Overdue", overdue, now)
    stats = task_stats(tasks, now)
    print(
        f"{stats['total']} total, {stats['completed']} completed, "
        f"{stats['pending']} pending, {stats['overdue']} overdue"
    )
    return 0


def cmd_add(ns: argparse.Namespace) -> int:
    try:
        payload = build_task_payload(
            ns.title,
            ns.date or datetime.now().date().isoformat(),
            ns.time,
            priority=ns.priority,
            follow_up_enabled=not ns.no_follow_up,
        )
    except ValidationError as exc:
        for err in exc.errors:
            _notice(f"{err['field']}: {err['message']}")
        return 1

    try:
        task = _client(ns).create_task(payload)
    except ApiError as exc:
        _notice(f"Failed to create task: {exc}")
        return 1
    print(f"Task created: {task.id}")
    return 0


def _set_completed(ns: argparse.Namespace, completed: bool) -> int:
    try:
        task = _client(ns).update_task(ns.id, completed=completed)
    except ApiError as exc:
        _notice(f"Failed to update task: {exc}")
        return 1
    print(("Task completed: " if completed else "Task marked as incomplete: ") + task.title)
    return 0


def cmd_done(ns: argparse.Namespace) -> int:
    return _set_completed(ns, True)


def cmd_undo(ns: argparse.Namespace) -> int:
    return _set_completed(ns, False)


def cmd_delete(ns: argparse.Namespace) -> int:
    try:
        _client(ns).delete_task(ns.id)
    except ApiError as exc:
        _notice(f"Failed to delete task: {exc}")
        return 1
    print("Task deleted")
    return 0


def cmd_watch(ns: argparse.Namespace, notifier=None, sleep=time.sleep) -> int:
    client = _client(ns)
    notifier = notifier or ConsoleNotifier()
    if notifier.permission == Permission.DEFAULT:
        notifier.request_permission()
    if notifier.permission != Permission.GRANTED:
        print("Notifications are off; reminders will not be shown.", file=sys.stderr)

    def mark_follow_up_sent(task_id):
        client.update_task(task_id, follow_up_sent=True)

    scheduler = ReminderScheduler(notifier, on_follow_up_sent=mark_follow_up_sent)
    print(f"Watching {client.base_url} (Ctrl-C to stop)")
    try:
        while True:
            try:
                tasks = client.list_tasks()
            except ApiError as exc:
                # keep the timers from the last good fetch
                _notice(f"Failed to fetch tasks: {exc}")
            else:
                armed = scheduler.sync(tasks)
                logger.info("Refreshed %d task(s), %d reminder(s) armed", len(tasks), armed)
            if ns.once:
                break
            sleep(ns.interval)
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.cancel_all()
    return 0


def cmd_notify_test(ns: argparse.Namespace, notifier=None) -> int:
    notifier = notifier or ConsoleNotifier()
    if notifier.permission == Permission.DEFAULT:
        notifier.request_permission()
    if not notifier.notify("TaskRemind", "Notifications are working correctly!"):
        _notice("Notifications are disabled")
        return 1
    return 0


def cmd_serve(ns: argparse.Namespace) -> int:
    from taskremind.app import create_app

    app = create_app()
    app.run(host=ns.host, port=ns.port, debug=Config.DEBUG)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="taskremind", description="Task reminders with follow-ups.")
    p.add_argument("--api-url", default=ClientConfig.API_URL, help="Task API base URL")
    p.add_argument("--log-level", default=None, help="Logging level (default from environment)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("serve", help="Run the task API server")
    sp.add_argument("--host", default=Config.HOST)
    sp.add_argument("--port", type=int, default=Config.PORT)
    sp.set_defaults(func=cmd_serve)

    sp = sub.add_parser("list", help="Show today's, upcoming and overdue tasks")
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("add", help="Create a task")
    sp.add_argument("title")
    sp.add_argument("--date", help="YYYY-MM-DD (default: today)")
    sp.add_argument("--time", required=True, help="HH:MM, local time")
    sp.add_argument("--priority", choices=["low", "medium", "high"], default="medium")
    sp.add_argument("--no-follow-up", action="store_true", help="Skip the one hour follow-up reminder")
    sp.set_defaults(func=cmd_add)

    for name, func, text in (
        ("done", cmd_done, "Mark a task completed"),
        ("undo", cmd_undo, "Mark a task incomplete"),
        ("delete", cmd_delete, "Delete a task"),
    ):
        sp = sub.add_parser(name, help=text)
        sp.add_argument("id")
        sp.set_defaults(func=func)

    sp = sub.add_parser("notify-test", help="Show a test notification")
    sp.set_defaults(func=cmd_notify_test)

    sp = sub.add_parser("watch", help="Fetch tasks periodically and show reminders")
    sp.add_argument("--interval", type=float, default=ClientConfig.REFRESH_SECONDS, help="Seconds between refreshes")
    sp.add_argument("--once", action="store_true", help=argparse.SUPPRESS)
    sp.set_defaults(func=cmd_watch)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    level = ns.log_level or (Config.LOG_LEVEL if ns.cmd == "serve" else ClientConfig.LOG_LEVEL)
    setup_logging(level)
    return int(ns.func(ns))


if __name__ == "__main__":
    raise SystemExit(main())
