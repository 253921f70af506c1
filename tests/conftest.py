import pytest

from time_compass.focus_timer import Permission
from time_compass.settings import UserSettings


class FakeAlerts:
    """Records alert calls instead of touching audio or the desktop"""

    def __init__(self, permission=Permission.DEFAULT, grant=True, fail=False):
        self.permission = permission
        self.grant = grant
        self.fail = fail
        self.tones = 0
        self.notifications = []
        self.permission_requests = 0

    def request_permission(self):
        self.permission_requests += 1
        self.permission = Permission.GRANTED if self.grant else Permission.DENIED
        return self.permission

    def notify(self, title, body):
        if self.fail:
            raise OSError("notification daemon gone")
        self.notifications.append((title, body))

    def emit_tone(self):
        if self.fail:
            raise RuntimeError("no audio device")
        self.tones += 1


class FakeScheduler:
    """Stands in for a Tk widget's after()/after_cancel()"""

    def __init__(self):
        self.jobs = {}
        self._next = 0
        self.cancelled = []

    def after(self, ms, func):
        self._next += 1
        job = f"after#{self._next}"
        self.jobs[job] = func
        return job

    def after_cancel(self, job):
        self.cancelled.append(job)
        self.jobs.pop(job, None)

    def run_pending(self):
        """Fire every job that is pending right now (one 'second')"""
        pending = list(self.jobs.items())
        self.jobs.clear()
        for _, func in pending:
            func()


@pytest.fixture
def settings():
    return UserSettings()


@pytest.fixture
def make_settings():
    def _make(**overrides):
        return UserSettings.from_dict(overrides, strict=True)
    return _make


@pytest.fixture
def fake_alerts():
    return FakeAlerts()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def make_alerts():
    return FakeAlerts
