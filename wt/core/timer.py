"""The master "today" timer."""

from typing import NamedTuple
from wt.common.logger import log
from wt.core.accumulator import Accumulator
from wt.core.constants import TICK_INTERVAL_MS
from wt.util.misc import format_signed_hm, format_time

EVENTS = ("start", "pause", "reset", "adjust")


class NetAdjustmentInfo(NamedTuple):
    time_str: str
    is_positive: bool


def _as_int(value, default=0):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


# The master accumulator for today's work time. Owns the 1s tick while running and tells its listeners about every
# transition after applying it.
class MasterTimer:

    def __init__(self, store, clock, ticker=None):
        self.store = store
        self.clock = clock
        self.ticker = ticker
        self.acc = Accumulator()
        self.net_adjustment = 0
        self.display = format_time(0)
        self.ticks = 0
        # The DayKey everything in memory belongs to. Set on load, moved only by roll_over().
        self.day = None

        self._update_callbacks = []
        self._listeners = {event: [] for event in EVENTS}

        self._load()

    #region === Subscriptions ===

    # Zero-argument callbacks fired on every state change and every tick, in registration order.
    def on_update(self, callback):
        self._update_callbacks.append(callback)

    # Handlers for one transition, run in registration order right after the master applies it. "adjust" handlers
    # receive the delta, the rest take no arguments.
    def subscribe(self, event, handler):
        if event not in self._listeners:
            raise ValueError(f"Unknown timer event '{event}'")
        self._listeners[event].append(handler)

    def _emit(self, event, *args):
        for handler in self._listeners[event]:
            handler(*args)

    def _trigger_update(self):
        for callback in self._update_callbacks:
            callback()

    #endregion === Subscriptions ===

    #region === State queries ===

    @property
    def running(self):
        return self.acc.running

    @property
    def running_since(self):
        return self.acc.running_since

    def current_elapsed(self):
        return self.acc.current(self.clock.now_ms())

    def net_adjustment_info(self):
        return NetAdjustmentInfo(format_signed_hm(self.net_adjustment), self.net_adjustment >= 0)

    #endregion === State queries ===

    #region === Operations ===

    def start(self):
        if self.running:
            return
        self.acc.start(self.clock.now_ms())
        self._schedule_tick()
        self.save()
        log.info(f"Timer started at {self.clock.now():%H:%M:%S}")
        self._emit("start")
        self._refresh()

    def pause(self):
        if not self.running:
            return
        self.acc.stop(self.clock.now_ms())
        self._cancel_tick()
        self.save()
        log.info(f"Timer paused at {self.clock.now():%H:%M:%S} with {self.acc.elapsed}s elapsed")
        self._emit("pause")
        self._refresh()

    # Clears today's time. `confirm` is the caller's gate: a zero-argument predicate that must return True for
    # anything to change. Returns whether the reset happened.
    def reset(self, confirm):
        if not confirm():
            log.debug("Reset declined")
            return False
        self._apply_reset()
        return True

    # Same as reset(), for a gate that has to be awaited (e.g. a dialog running on an event loop).
    async def areset(self, confirm):
        if not await confirm():
            log.debug("Reset declined")
            return False
        self._apply_reset()
        return True

    def _apply_reset(self):
        self._cancel_tick()
        self.acc.reset()
        self.net_adjustment = 0
        self.save()
        self.store.remove("timer_state")
        self.store.clear_today("net_adjustments", day=self.day)
        log.info("Timer reset")
        self._emit("reset")
        self._refresh()

    # Manual correction. Time removed beyond what's available is absorbed by clamping at zero.
    def adjust(self, seconds):
        seconds = int(seconds)
        self.acc.elapsed += seconds
        self.net_adjustment += seconds
        if self.acc.elapsed < 0:
            self.acc.elapsed = 0
        self.save()
        log.info(f"Timer adjusted by {seconds} seconds")
        self._emit("adjust", seconds)
        self._refresh()

    # Closes out the loaded day at `day_end_ms` and starts `new_day` from zero. A running timer carries on, counting
    # the new day from `new_day_start_ms`.
    def roll_over(self, new_day, day_end_ms, new_day_start_ms):
        was_running = self.running
        self.acc.stop(day_end_ms)
        self.save()
        log.info(f"Closed {self.day} with {format_time(self.acc.elapsed)} (net adjustment {self.net_adjustment}s)")

        self.day = new_day
        self.acc.reset()
        self.net_adjustment = 0
        if was_running:
            self.acc.start(new_day_start_ms)
        self.save()
        self.display = format_time(self.current_elapsed())

    #endregion === Operations ===

    #region === Ticking ===

    def _schedule_tick(self):
        if self.ticker is not None:
            self.ticker.start(self._tick, TICK_INTERVAL_MS)

    def _cancel_tick(self):
        if self.ticker is not None:
            self.ticker.stop()

    def stop_ticking(self):
        self._cancel_tick()

    def _tick(self):
        # A tick that slipped past a pause/reset must not do anything.
        if not self.running:
            return
        self.ticks += 1
        self._refresh()

    def _refresh(self):
        self.display = format_time(self.current_elapsed())
        self._trigger_update()

    #endregion === Ticking ===

    #region === Persistence ===

    # Restores today's state. A running timer resumes from its stored start stamp, so time spent while the app was
    # closed still counts. State from another day is discarded entirely.
    def _load(self):
        self.day = self.store.today()
        self.acc.elapsed = max(0, _as_int(self.store.get_today("work_times", 0, day=self.day)))

        state = self.store.read_current("timer_state", discard_stale=True)
        if state:
            self.acc.elapsed = max(0, _as_int(state.get("elapsed"), self.acc.elapsed))
            start_time = state.get("startTime")
            if state.get("isRunning") and _as_int(start_time, None) is not None:
                self.acc.running_since = int(start_time)
                self._schedule_tick()

        self.net_adjustment = _as_int(self.store.get_today("net_adjustments", 0, day=self.day))
        self.display = format_time(self.current_elapsed())
        log.info(f"Timer state loaded from storage (elapsed={self.acc.elapsed}s, running={self.running})")

    def save(self):
        self.store.set_today("work_times", self.current_elapsed(), day=self.day)
        self.store.write("timer_state", {
            "elapsed": self.acc.elapsed,
            "isRunning": self.running,
            "startTime": self.acc.running_since,
            "date": self.day,
        })
        self.store.set_today("net_adjustments", self.net_adjustment, day=self.day)
        log.debug(f"Timer state saved at {self.clock.now():%H:%M:%S}")

    #endregion === Persistence ===
