import threading
from datetime import datetime, timedelta, timezone

import pytest
from werkzeug.serving import make_server

from taskremind.app import create_app
from taskremind.client.notifications import Notifier, Permission
from taskremind.utils.store import TaskStore

NOW = datetime(2025, 1, 12, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Hand-driven clock returning an aware datetime."""

    def __init__(self, start=NOW):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class FakeTimer:
    def __init__(self, factory, seconds, callback):
        self.factory = factory
        self.seconds = seconds
        self.callback = callback
        self.due = None
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True
        self.due = self.factory.clock.now + timedelta(seconds=self.seconds)

    def cancel(self):
        self.cancelled = True


class FakeTimerFactory:
    """Timer factory whose timers only fire when ``advance`` moves the clock past them."""

    def __init__(self, clock):
        self.clock = clock
        self.timers = []

    def __call__(self, seconds, callback):
        timer = FakeTimer(self, seconds, callback)
        self.timers.append(timer)
        return timer

    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled and t.due is not None]

    def advance(self, seconds):
        target = self.clock.now + timedelta(seconds=seconds)
        while True:
            due = [t for t in self.live() if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.clock.now = timer.due
            timer.due = None
            timer.callback()
        self.clock.now = target


class RecordingNotifier(Notifier):
    def __init__(self, permission=Permission.GRANTED):
        super().__init__(permission)
        self.shown = []

    def request_permission(self):
        self.permission = Permission.GRANTED
        return self.permission

    def deliver(self, title, body, options):
        self.shown.append((title, body))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers(clock):
    return FakeTimerFactory(clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    return TaskStore()


@pytest.fixture
def app(store):
    app = create_app("taskremind.config.TestingConfig", store=store)
    yield app
    store.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def live_server(app):
    """Serve the app on an ephemeral port; yields the base URL."""
    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    thread.join(timeout=5)


def future_iso(hours=1):
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat().replace("+00:00", "Z")
