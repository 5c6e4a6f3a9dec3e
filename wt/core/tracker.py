"""Application state: the master timer, the project ledger and the timeline, wired together.

Components never reach into each other. Every cross-component effect is a
handler registered here on the component that owns the transition, and the
registration order below is the order those effects happen in.
"""

from wt.common.logger import log
from wt.common.setup import PATHS
from wt.core.clock import SystemClock
from wt.core.constants import AUTO_CORRECT_INTERVAL_SECONDS, AUTOSAVE_EVERY_TICKS
from wt.core.ledger import ProjectLedger
from wt.core.store import PersistentStore
from wt.core.sync import SyncReconciler
from wt.core.timeline import SessionTimeline
from wt.core.timer import MasterTimer
from wt.util.misc import day_start_ms, format_time, next_day


class WorkTimeTracker:

    def __init__(self, store=None, clock=None, ticker=None, reconciler=None):
        self.clock = clock or SystemClock()
        self.store = store or PersistentStore(PATHS.store, self.clock)
        self.reconciler = reconciler or SyncReconciler()

        self.timer = MasterTimer(self.store, self.clock, ticker)
        self.ledger = ProjectLedger(self.store, self.clock, self.timer, self.reconciler)
        self.timeline = SessionTimeline(self.store, self.clock)

        self._update_callbacks = []
        self._saved_at_tick = 0

        self._wire()
        self.initial_sync()
        log.info("Work time tracker initialized")

    #region === Wiring ===

    def _wire(self):
        self.timer.subscribe("start", self.ledger.on_master_start)
        self.timer.subscribe("start", self.sync_if_needed)

        # Correction runs first so a restamped project gets its interval closed by the ledger, then the open interval
        # (if still open) is closed before the ledger folds it.
        self.timer.subscribe("pause", self.ledger.sync_to_master)
        self.timer.subscribe("pause", lambda: self.timeline.close_open_session(self.ledger.active_project))
        self.timer.subscribe("pause", self.ledger.on_master_pause)
        self.timer.subscribe("pause", self.ledger.verify_sync)

        self.timer.subscribe("reset", self.timeline.discard_today)
        self.timer.subscribe("reset", self.ledger.on_master_reset)

        self.timer.subscribe("adjust", self.ledger.on_master_adjust)
        self.timer.subscribe("adjust", lambda seconds: self.sync_if_needed())

        self.ledger.on_interval_close(self.timeline.close_open_session)
        self.ledger.on_update(self._trigger_update)
        self.timer.on_update(self._on_timer_update)

    def on_update(self, callback):
        self._update_callbacks.append(callback)

    def _trigger_update(self):
        for callback in self._update_callbacks:
            callback()

    # Runs on every master tick and transition. Auto-correction keys off the wall clock's seconds, so skipped ticks
    # don't shift its phase.
    def _on_timer_update(self):
        self.roll_over_if_needed()
        ticks = self.timer.ticks
        if self.timer.running and ticks % AUTOSAVE_EVERY_TICKS == 0 and ticks != self._saved_at_tick:
            self._saved_at_tick = ticks
            self.save()
        if self.clock.now().second % AUTO_CORRECT_INTERVAL_SECONDS == 0:
            if not self.ledger.verify_sync():
                log.info("Auto-correcting timer drift")
                self.ledger.sync_to_master()
        self._trigger_update()

    #endregion === Wiring ===

    #region === Day boundary ===

    # Closes out the loaded day once the local date has moved past it. The open session is cut at midnight and filed
    # under the old day, the final totals are written under the old day, and everything restarts from zero. A running
    # timer keeps running and counts the new day from its local midnight. Returns whether a rollover happened.
    def roll_over_if_needed(self):
        old_day, today = self.timer.day, self.clock.today()
        if today <= old_day:
            return False
        day_end = day_start_ms(next_day(old_day))
        new_day_start = day_start_ms(today)
        if next_day(old_day) != today:
            log.warning(f"Skipped from {old_day} to {today}; the days in between are not counted")

        active = self.ledger.active_project
        if self.timer.running and active is not None and active.acc.running:
            self.timeline.record_session_boundary(active, active.acc.running_since, day_end, day=old_day)
        self.timer.roll_over(today, day_end, new_day_start)
        self.ledger.roll_over(today, day_end)
        log.info(f"Rolled over from {old_day} to {today}")
        return True

    #endregion === Day boundary ===

    #region === Operations ===

    # Every operation first closes out a finished day, so nothing from yesterday lands under today's key.
    def start(self):
        self.roll_over_if_needed()
        self.timer.start()

    def pause(self):
        self.roll_over_if_needed()
        self.timer.pause()

    def reset(self, confirm):
        self.roll_over_if_needed()
        return self.timer.reset(confirm)

    async def areset(self, confirm):
        self.roll_over_if_needed()
        return await self.timer.areset(confirm)

    def adjust(self, seconds):
        self.roll_over_if_needed()
        self.timer.adjust(seconds)

    def add_project(self, name):
        self.roll_over_if_needed()
        return self.ledger.add_project(name)

    def delete_project(self, project_id):
        self.roll_over_if_needed()
        deleted = self.ledger.delete_project(project_id)
        if deleted:
            self.sync_if_needed()
        return deleted

    def select_project(self, project_id):
        self.roll_over_if_needed()
        return self.ledger.select_project(project_id)

    def sync_if_needed(self):
        if not self.ledger.verify_sync():
            self.ledger.sync_to_master()

    def initial_sync(self):
        if not self.ledger.verify_sync():
            log.info("Initial synchronization correction needed")
            self.ledger.sync_to_master()

    # Manual "sync now": reconcile regardless of the schedule, log before/after, persist everything.
    def force_sync(self):
        self.roll_over_if_needed()
        master_total, project_total = self.timer.current_elapsed(), self.ledger.total_elapsed()
        log.info(f"Before sync - main {format_time(master_total)}, projects {format_time(project_total)}, "
                 f"diff {abs(master_total - project_total)}s")
        applied = self.ledger.sync_to_master()
        master_total, project_total = self.timer.current_elapsed(), self.ledger.total_elapsed()
        log.info(f"After sync - main {format_time(master_total)}, projects {format_time(project_total)}, "
                 f"diff {abs(master_total - project_total)}s")
        self.save()
        self._trigger_update()
        return applied

    def save(self):
        self.roll_over_if_needed()
        self.timer.save()
        self.ledger.save()

    # Persist and stop ticking. The master keeps its running stamp, so a later load picks the day back up.
    def shutdown(self):
        self.save()
        self.timer.stop_ticking()
        log.info("Work time tracker shut down")

    #endregion === Operations ===

    #region === Queries ===

    def current_elapsed(self):
        return self.timer.current_elapsed()

    def total_elapsed(self):
        return self.ledger.total_elapsed()

    def net_adjustment_info(self):
        return self.timer.net_adjustment_info()

    def drift_status(self):
        return self.reconciler.status(self.timer.current_elapsed(), self.ledger.total_elapsed())

    def project_times(self):
        return self.ledger.project_times()

    def todays_sessions(self):
        return self.timeline.todays_sessions()

    def current_session(self):
        return self.timeline.current_session(self.ledger.active_project, self.timer.running)

    def time_range(self):
        return self.timeline.time_range(self.timer.running_since)

    def debug_timeline(self):
        return self.timeline.debug_dump(self.current_session())

    #endregion === Queries ===
