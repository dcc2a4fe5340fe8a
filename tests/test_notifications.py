import io

import pytest

from conftest import RecordingNotifier

from taskremind.client.notifications import ConsoleNotifier, Notifier, Permission, reminder_text


def test_reminder_text():
    assert reminder_text("Pay rent") == ("Task Reminder", "Time to complete: Pay rent")
    assert reminder_text("Pay rent", is_follow_up=True) == ("Task Follow-up", "Still pending: Pay rent")


def test_notify_is_suppressed_without_permission():
    for permission in (Permission.DEFAULT, Permission.DENIED):
        notifier = RecordingNotifier(permission)
        assert notifier.notify("hello", "world") is False
        assert notifier.shown == []


def test_notify_delivers_when_granted():
    notifier = RecordingNotifier()
    assert notifier.show_task_reminder("Stretch") is True
    assert notifier.shown == [("Task Reminder", "Time to complete: Stretch")]


def test_delivery_failure_returns_false(caplog):
    class Broken(RecordingNotifier):
        def deliver(self, title, body, options):
            raise OSError("no display")

    assert Broken().notify("hi") is False
    assert "Failed to show notification" in caplog.text


def test_console_notifier_permission_prompt():
    out = io.StringIO()
    notifier = ConsoleNotifier(stream=out, prompt=lambda _: "y")

    assert notifier.request_permission() == Permission.GRANTED
    assert notifier.show_task_reminder("Walk the dog", is_follow_up=True) is True
    assert "Task Follow-up: Still pending: Walk the dog" in out.getvalue()


def test_console_notifier_denied():
    notifier = ConsoleNotifier(stream=io.StringIO(), prompt=lambda _: "")
    assert notifier.request_permission() == Permission.DENIED
    assert notifier.notify("x") is False


def test_console_notifier_eof_counts_as_denied():
    def closed(_):
        raise EOFError

    assert ConsoleNotifier(stream=io.StringIO(), prompt=closed).request_permission() == Permission.DENIED


def test_notifier_base_requires_backend_methods():
    with pytest.raises(TypeError):
        Notifier()

    class HalfDone(Notifier):
        def deliver(self, title, body, options):
            pass

    with pytest.raises(TypeError):
        HalfDone()
