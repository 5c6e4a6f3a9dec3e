"""Durable keyed storage, one JSON document per logical key.

Reads never raise: a missing or malformed document falls back to the
caller's default (malformed ones are logged). Writes are best-effort and
failures are logged and swallowed, so callers must not assume a write
landed. There's no locking; each call is its own read-modify-write.
"""

import json
from pathlib import Path
from wt.common.logger import log

# Logical key -> on-disk document name. These names are the persisted layout and must stay stable.
STORAGE_KEYS = {
    "work_times": "worktimes",
    "timer_state": "timerState",
    "timeline_data": "timelineData",
    "net_adjustments": "netAdjustments",
    "projects": "projects",
    "project_times": "projectTimes",
    "project_states": "projectStates",
    "active_project": "activeProject",
}

_MISSING = object()


class PersistentStore:

    def __init__(self, root: Path, clock):
        self.root = Path(root)
        self.clock = clock
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key):
        return self.root / f"{STORAGE_KEYS[key]}.json"

    #region === Raw access ===

    # Returns the stored value for key, or `default` when absent or unparseable. When `expect` is given (or
    # can be inferred from a non-None default), a value of the wrong shape also counts as unparseable.
    def read(self, key, default=None, expect=None):
        if expect is None and default is not None:
            expect = type(default)
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                value = json.load(f)
        except (OSError, json.JSONDecodeError, ValueError, TypeError):
            log.warning(f"Failed to parse stored value for '{key}' at '{path}', using default.", exc_info=True)
            return default
        if value is None:
            return default
        if expect is not None and not isinstance(value, expect):
            log.warning(f"Stored value for '{key}' is a {type(value).__name__}, expected {expect.__name__}; using default.")
            return default
        return value

    # Writes value under key. Never raises; returns whether the write actually happened.
    def write(self, key, value):
        path = self._path(key)
        try:
            payload = json.dumps(value, indent=2)
            with open(path, "w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError):
            log.error(f"Failed to save '{key}' to '{path}'", exc_info=True)
            return False
        return True

    def remove(self, key):
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError:
            log.error(f"Failed to remove '{key}' at '{path}'", exc_info=True)

    #endregion === Raw access ===

    #region === Day-scoped helpers ===

    def today(self):
        return self.clock.today()

    # Today's slice of a day -> value map. Absent days (or a slice of the wrong shape) give `default`. The day helpers
    # all take an optional `day` so a component can keep writing to the day it loaded after midnight has passed.
    def get_today(self, key, default=0, day=None):
        day_map = self.read(key, {})
        value = day_map.get(day or self.today(), _MISSING)
        if value is _MISSING:
            return default
        if default is not None and not isinstance(value, type(default)):
            log.warning(f"Today's slice of '{key}' has unexpected shape {type(value).__name__}; using default.")
            return default
        return value

    def set_today(self, key, value, day=None):
        day_map = self.read(key, {})
        day_map[day or self.today()] = value
        return self.write(key, day_map)

    def clear_today(self, key, day=None):
        day_map = self.read(key, {})
        if day_map.pop(day or self.today(), _MISSING) is not _MISSING:
            self.write(key, day_map)

    # Appends one item to today's list in a day -> list map.
    def append_today(self, key, item, day=None):
        day = day or self.today()
        day_map = self.read(key, {})
        items = day_map.get(day)
        if not isinstance(items, list):
            items = []
        items.append(item)
        day_map[day] = items
        return self.write(key, day_map)

    # Reads a document that carries its own `date` field. Anything not stamped with today is stale and comes back
    # as an empty dict; with `discard_stale` the stale document is also deleted.
    def read_current(self, key, discard_stale=False):
        value = self.read(key, {})
        if not value:
            return {}
        stored_day = value.get("date")
        if stored_day == self.today():
            return value
        if stored_day:
            log.info(f"Discarding stale '{key}' from {stored_day} (today is {self.today()})")
            if discard_stale:
                self.remove(key)
        return {}

    #endregion === Day-scoped helpers ===
