"""Client-side Pomodoro state machine.

The timer counts down one tick at a time (``tick()`` is driven by a
``Ticker`` thread or directly by tests) and hands every finished session to
a recorder. Local counters only advance once the recorder has accepted the
session; a failed write rolls the timer back to where the attempt started.
The recorder is called without holding the lock, so a slow upload never
blocks ``snapshot()`` or the controls.
"""

import logging
import threading
from enum import Enum

from diary.errors import DiaryError, UpstreamFailure, ValidationError

logger = logging.getLogger(__name__)


class SessionType(str, Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


DEFAULT_DURATIONS = {
    SessionType.WORK: 25,
    SessionType.SHORT_BREAK: 5,
    SessionType.LONG_BREAK: 15,
}
WORK_SESSIONS_PER_LONG_BREAK = 4


def format_remaining(seconds):
    minutes, seconds = divmod(max(int(seconds), 0), 60)
    return f"{minutes:02d}:{seconds:02d}"


class PomodoroTimer:
    def __init__(self, recorder, durations=None, unit_seconds=60):
        self.recorder = recorder
        self.unit_seconds = unit_seconds
        self.durations = dict(DEFAULT_DURATIONS)
        self.session_type = SessionType.WORK
        self.state = TimerState.IDLE
        self.task_id = None
        self.completed_today = 0
        self.sessions = []
        self.last_error = None
        self._lock = threading.RLock()
        self._reset()
        for session_type, minutes in (durations or {}).items():
            self.set_duration(session_type, minutes)

    @property
    def remaining(self):
        return self._remaining

    @property
    def display(self):
        return format_remaining(self._remaining)

    @property
    def progress(self):
        # Measured against the length the countdown started with
        total = self._session_minutes * self.unit_seconds
        return (total - self._remaining) / total * 100

    def set_duration(self, session_type, minutes):
        session_type = SessionType(session_type)
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 1:
            raise ValidationError(
                "invalid request",
                details=[{"field": session_type.value, "message": "duration must be a whole number of minutes, at least 1"}],
            )
        with self._lock:
            self.durations[session_type] = minutes
            if self.state == TimerState.IDLE and session_type == self.session_type:
                self._reset()

    def select_task(self, todo_id):
        with self._lock:
            self.task_id = todo_id

    def start(self):
        with self._lock:
            if self.state == TimerState.COMPLETED:
                # The finished session is still being recorded
                return
            if self.state in (TimerState.RUNNING, TimerState.PAUSED):
                # Restarting abandons the current countdown; nothing is recorded
                self._reset()
            self.last_error = None
            self.state = TimerState.RUNNING
            logger.debug("timer started", extra={"type": self.session_type.value})

    def toggle_pause(self):
        with self._lock:
            if self.state == TimerState.RUNNING:
                self.state = TimerState.PAUSED
            elif self.state == TimerState.PAUSED:
                self.state = TimerState.RUNNING

    def tick(self):
        """Advance one second; returns True when this tick finished a session."""
        with self._lock:
            if self.state != TimerState.RUNNING:
                return False
            self._remaining -= 1
            if self._remaining > 0:
                return False
            self.state = TimerState.COMPLETED
            self._remaining = 0
            is_work = self.session_type == SessionType.WORK
            record = {
                "type": self.session_type.value,
                "duration_minutes": self._session_minutes,
                "task_id": self.task_id if is_work else None,
            }
        self._record(record)
        return True

    def reset(self):
        with self._lock:
            if self.state != TimerState.COMPLETED:
                self._reset()

    def switch_type(self, session_type):
        session_type = SessionType(session_type)
        with self._lock:
            if self.state == TimerState.COMPLETED:
                return
            self.session_type = session_type
            self._reset()

    def _reset(self):
        self.state = TimerState.IDLE
        self._session_minutes = self.durations[self.session_type]
        self._remaining = self._session_minutes * self.unit_seconds

    def _record(self, record):
        try:
            saved = self.recorder.record(record)
        except DiaryError as exc:
            self._roll_back(record, exc)
            return
        except Exception as exc:
            self._roll_back(record, UpstreamFailure(f"Could not record session: {exc}"))
            raise

        with self._lock:
            self.last_error = None
            self.sessions.insert(0, saved or record)
            if self.session_type == SessionType.WORK:
                if self.completed_today % WORK_SESSIONS_PER_LONG_BREAK == WORK_SESSIONS_PER_LONG_BREAK - 1:
                    next_type = SessionType.LONG_BREAK
                else:
                    next_type = SessionType.SHORT_BREAK
                self.completed_today += 1
            else:
                next_type = SessionType.WORK
            logger.info(
                "session completed",
                extra={"type": record["type"], "next_type": next_type.value},
            )
            self.session_type = next_type
            self._reset()

    def _roll_back(self, record, error):
        with self._lock:
            self.last_error = error
            self._reset()
        logger.warning(
            "session not recorded, timer rolled back",
            extra={"type": record["type"], "error": error.message},
        )

    def snapshot(self):
        with self._lock:
            return {
                "state": self.state.value,
                "type": self.session_type.value,
                "remaining": self._remaining,
                "display": self.display,
                "progress": self.progress,
                "task_id": self.task_id,
                "completed_today": self.completed_today,
                "durations": {key.value: value for key, value in self.durations.items()},
                "last_error": self.last_error.message if self.last_error else None,
            }
