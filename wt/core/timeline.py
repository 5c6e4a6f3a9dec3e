"""Per-day log of closed (start, end, project) intervals."""

import math
from dataclasses import dataclass
from typing import NamedTuple
from wt.common.logger import log
from wt.core.constants import DEFAULT_PROJECT_COLOR, MIN_SESSION_DURATION_MS
from wt.util.misc import day_start_ms, duration_minutes, format_clock

HOUR_MS = 60 * 60 * 1000


@dataclass(frozen=True)
class Session:
    start: int
    end: int
    project_id: str
    project_name: str
    project_color: str

    @property
    def duration_ms(self):
        return self.end - self.start

    def to_record(self):
        return {
            "start": self.start,
            "end": self.end,
            "projectId": self.project_id,
            "projectName": self.project_name,
            "projectColor": self.project_color,
        }

    @staticmethod
    def from_record(record):
        """Build a Session from a stored dict, or None if it's unusable."""
        if not isinstance(record, dict):
            return None
        start, end = record.get("start"), record.get("end")
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (start, end)):
            return None
        if start >= end:
            return None
        return Session(
            int(start),
            int(end),
            str(record.get("projectId", "")),
            str(record.get("projectName") or "Unknown project"),
            str(record.get("projectColor") or DEFAULT_PROJECT_COLOR),
        )


class TimeRange(NamedTuple):
    day_start: int
    start_hour: int
    end_hour: int
    start: int
    end: int

    @property
    def duration(self):
        return self.end - self.start


class SessionTimeline:

    def __init__(self, store, clock, min_duration_ms=MIN_SESSION_DURATION_MS):
        self.store = store
        self.clock = clock
        self.min_duration_ms = min_duration_ms
        self._change_callbacks = []

    # Zero-argument callbacks fired whenever the stored sessions change (a session recorded, or today discarded).
    def on_change(self, callback):
        self._change_callbacks.append(callback)

    def _trigger_change(self):
        for callback in self._change_callbacks:
            callback()

    # Appends one closed interval to today's list (or `day`'s, when closing out a finished day). Intervals not longer
    # than the minimum are dropped as noise.
    def record_session_boundary(self, project, start, end, day=None):
        if start is None or end - start <= self.min_duration_ms:
            log.debug(f"Discarding {0 if start is None else end - start}ms session for '{project.name}'")
            return None
        session = Session(int(start), int(end), project.id, project.name, project.color)
        self.store.append_today("timeline_data", session.to_record(), day=day)
        log.info(f"Saved timeline session: {project.name} from {format_clock(start)} to {format_clock(end)}")
        self._trigger_change()
        return session

    # Closes the project's currently open interval at now. Hooked to master pause and to the ledger's interval-close
    # hook (project switch, drift correction).
    def close_open_session(self, project):
        if project is None or not project.acc.running:
            return None
        return self.record_session_boundary(project, project.acc.running_since, self.clock.now_ms())

    def discard_today(self):
        self.store.clear_today("timeline_data")
        log.info("Discarded today's timeline")
        self._trigger_change()

    # Today's sessions in the order they were recorded (not sorted by time).
    def todays_sessions(self):
        records = self.store.get_today("timeline_data", [])
        sessions = []
        for record in records:
            session = Session.from_record(record)
            if session is None:
                log.warning(f"Skipping malformed timeline entry: {record!r}")
                continue
            sessions.append(session)
        return sessions

    # The still-open interval of a running project, as an unsaved Session. None when nothing is running.
    def current_session(self, project, master_running):
        if not master_running or project is None or not project.acc.running:
            return None
        now = self.clock.now_ms()
        if project.acc.running_since >= now:
            return None
        return Session(project.acc.running_since, now, project.id, project.name, project.color)

    # Visible hour window for today: the earliest and latest activity, padded by an hour each side, kept within the
    # day. `open_start` is the master's running-since stamp, if it's running.
    def time_range(self, open_start=None):
        day_start = day_start_ms(self.clock.today())
        now = self.clock.now_ms()
        earliest = latest = now
        for session in self.todays_sessions():
            earliest = min(earliest, session.start)
            latest = max(latest, session.end)
        if open_start is not None:
            earliest = min(earliest, open_start)

        start_hour = max(0, math.floor((earliest - day_start) / HOUR_MS) - 1)
        end_hour = min(24, math.ceil((latest - day_start) / HOUR_MS) + 1)
        return TimeRange(
            day_start,
            start_hour,
            end_hour,
            day_start + start_hour * HOUR_MS,
            day_start + end_hour * HOUR_MS,
        )

    # Dumps today's sessions and the open one to the log.
    def debug_dump(self, open_session=None):
        sessions = self.todays_sessions()
        log.info("=== Timeline Debug ===")
        log.info(f"Date: {self.clock.today()}")
        log.info(f"Saved sessions: {len(sessions)}")
        for i, s in enumerate(sessions, start=1):
            log.info(f"  {i}: {s.project_name} - {format_clock(s.start)} to {format_clock(s.end)} "
                     f"({duration_minutes(s.start, s.end)} min)")
        if open_session is not None:
            log.info(f"Current: {open_session.project_name} - {format_clock(open_session.start)} to "
                     f"{format_clock(open_session.end)} ({duration_minutes(open_session.start, open_session.end)} min) - RUNNING")
        log.info("======================")
        return sessions
