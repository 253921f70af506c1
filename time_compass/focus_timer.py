"""
Focus countdown state machine.

The timer itself never schedules anything: whoever owns it calls tick()
once per second while it is running. Audible and notification alerts go
through an AlertCapability so the machine can run without audio or a
desktop notification daemon.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Protocol

logger = logging.getLogger('time_compass.focus')

FINISH_TITLE = "Focus complete!"
FINISH_BODY = "Nice work! Take a break."


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class Permission(str, Enum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class AlertCapability(Protocol):
    permission: Permission

    def request_permission(self) -> Permission: ...

    def notify(self, title: str, body: str) -> None: ...

    def emit_tone(self) -> None: ...


def format_mmss(seconds: int) -> str:
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


class FocusTimerLogic:
    """Countdown with IDLE -> RUNNING <-> PAUSED -> FINISHED phases"""

    def __init__(self, duration_minutes: int, alerts: Optional[AlertCapability] = None,
                 on_update: Optional[Callable[[int], None]] = None,
                 on_finish: Optional[Callable[[], None]] = None):
        self.duration_minutes = duration_minutes
        self.remaining = duration_minutes * 60
        self.phase = Phase.IDLE
        self.alerts = alerts
        self.on_update = on_update
        self.on_finish = on_finish
        self._pending_minutes: Optional[int] = None
        self._permission_asked = False
        self._alerted = False

    @property
    def total_seconds(self) -> int:
        return self.duration_minutes * 60

    @property
    def running(self) -> bool:
        return self.phase == Phase.RUNNING

    def start(self) -> bool:
        """IDLE/PAUSED -> RUNNING. Returns False when nothing changed."""
        if self.remaining == 0 or self.phase not in (Phase.IDLE, Phase.PAUSED):
            return False

        if not self._permission_asked:
            self._permission_asked = True
            self._request_permission()

        self.phase = Phase.RUNNING
        logger.debug(f"Focus timer running, {self.remaining}s left")
        self._changed()
        return True

    def pause(self) -> bool:
        if self.phase != Phase.RUNNING:
            return False
        self.phase = Phase.PAUSED
        logger.debug(f"Focus timer paused at {self.remaining}s")
        self._changed()
        return True

    def toggle(self) -> bool:
        """Start when stopped, pause when running"""
        if self.running:
            return self.pause()
        return self.start()

    def reset(self):
        """Any phase -> IDLE, applying a duration set while a session was live"""
        if self._pending_minutes is not None:
            self.duration_minutes = self._pending_minutes
            self._pending_minutes = None
        self.phase = Phase.IDLE
        self.remaining = self.total_seconds
        self._alerted = False
        self._changed()

    def set_duration(self, minutes: int):
        """Takes effect now when idle, otherwise at the next reset()"""
        if self.phase != Phase.IDLE:
            self._pending_minutes = minutes
            return
        self._pending_minutes = None
        self.duration_minutes = minutes
        self.remaining = self.total_seconds
        self._changed()

    def tick(self) -> bool:
        """One second elapsed. Returns whether the timer is still running."""
        if self.phase != Phase.RUNNING:
            return False

        self.remaining = max(self.remaining - 1, 0)
        if self.remaining == 0:
            self.phase = Phase.FINISHED
            logger.info(f"Focus session of {self.duration_minutes} min finished")
            self._changed()
            self._finish()
        else:
            self._changed()
        return self.running

    def progress(self) -> float:
        """Completed share of the session in percent"""
        total = self.total_seconds
        if total <= 0:
            return 0.0
        return (total - self.remaining) / total * 100

    def status_text(self) -> str:
        if self.phase == Phase.RUNNING:
            mins, secs = divmod(self.remaining, 60)
            return f"Focusing: {mins} min {secs} s left. Stay with it!"
        if self.phase == Phase.PAUSED:
            return "Paused. Resume when you're ready."
        if self.phase == Phase.FINISHED:
            return "Focus complete! Take a break."
        return "Ready to focus?"

    def _changed(self):
        if self.on_update:
            self.on_update(self.remaining)

    def _request_permission(self):
        if self.alerts is None:
            return
        try:
            if self.alerts.permission == Permission.DEFAULT:
                self.alerts.request_permission()
        except Exception as e:
            logger.warning(f"Notification permission request failed: {e}")

    def _finish(self):
        if self._alerted:
            return
        self._alerted = True

        if self.alerts is not None:
            try:
                self.alerts.emit_tone()
            except Exception as e:
                logger.warning(f"Tone playback failed: {e}")

            try:
                permission = self.alerts.permission
                if permission == Permission.DEFAULT:
                    permission = self.alerts.request_permission()
                if permission == Permission.GRANTED:
                    self.alerts.notify(FINISH_TITLE, FINISH_BODY)
            except Exception as e:
                logger.warning(f"Finish notification failed: {e}")

        if self.on_finish:
            self.on_finish()
