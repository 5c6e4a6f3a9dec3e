"""Unit tests for the building blocks.

Covers: wt.core.store, wt.core.accumulator, wt.core.timer, wt.core.sync,
wt.core.timeline, wt.util.misc
"""

import asyncio
import json
import shutil
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

from fakes import FakeClock, FakeTicker


def _make_store(tmpdir, clock):
    from wt.core.store import PersistentStore
    return PersistentStore(Path(tmpdir), clock)


# ──────────────────────────────────────────────────────────────────────────
# store.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestPersistentStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.clock = FakeClock()
        self.store = _make_store(self.tmpdir, self.clock)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_read_absent_returns_default(self):
        self.assertEqual(self.store.read("projects", []), [])
        self.assertIsNone(self.store.read("active_project"))

    def test_documents_use_stable_names(self):
        self.store.write("timer_state", {"elapsed": 1})
        self.store.write("project_times", {})
        self.assertTrue((Path(self.tmpdir) / "timerState.json").exists())
        self.assertTrue((Path(self.tmpdir) / "projectTimes.json").exists())

    def test_write_then_read(self):
        self.store.write("projects", [{"id": "a", "name": "A", "color": "#fff"}])
        self.assertEqual(self.store.read("projects", []), [{"id": "a", "name": "A", "color": "#fff"}])

    def test_corrupted_document_falls_back_and_warns(self):
        with open(Path(self.tmpdir) / "worktimes.json", "w") as f:
            f.write("{not json!!")
        with self.assertLogs("worktimer", level="WARNING"):
            self.assertEqual(self.store.read("work_times", {}), {})

    def test_wrong_shape_falls_back(self):
        self.store.write("work_times", [1, 2, 3])
        with self.assertLogs("worktimer", level="WARNING"):
            self.assertEqual(self.store.read("work_times", {}), {})

    def test_write_failure_is_swallowed(self):
        with patch("builtins.open", side_effect=OSError("disk full")):
            with self.assertLogs("worktimer", level="ERROR"):
                self.assertFalse(self.store.write("projects", []))

    def test_unserializable_value_is_swallowed(self):
        with self.assertLogs("worktimer", level="ERROR"):
            self.assertFalse(self.store.write("projects", [object()]))

    def test_today_helpers(self):
        self.assertEqual(self.store.get_today("work_times", 0), 0)
        self.store.set_today("work_times", 120)
        self.assertEqual(self.store.get_today("work_times", 0), 120)
        self.assertEqual(self.store.read("work_times", {}), {"2026-03-10": 120})

        self.store.clear_today("work_times")
        self.assertEqual(self.store.get_today("work_times", 0), 0)

    def test_day_helpers_take_an_explicit_day(self):
        self.store.set_today("work_times", 300, day="2026-03-09")
        self.store.append_today("timeline_data", {"n": 1}, day="2026-03-09")
        self.assertEqual(self.store.read("work_times", {}), {"2026-03-09": 300})
        self.assertEqual(self.store.get_today("work_times", 0), 0)
        self.assertEqual(self.store.get_today("work_times", 0, day="2026-03-09"), 300)
        self.assertEqual(self.store.get_today("timeline_data", [], day="2026-03-09"), [{"n": 1}])

        self.store.clear_today("work_times", day="2026-03-09")
        self.assertEqual(self.store.read("work_times", {}), {})

    def test_today_slice_wrong_shape_defaults(self):
        self.store.write("project_times", {"2026-03-10": [1, 2]})
        with self.assertLogs("worktimer", level="WARNING"):
            self.assertEqual(self.store.get_today("project_times", {}), {})

    def test_other_days_are_untouched(self):
        self.store.write("timeline_data", {"2026-03-09": [{"start": 1, "end": 5000}]})
        self.store.append_today("timeline_data", {"start": 10, "end": 5000})
        self.store.clear_today("timeline_data")
        self.assertEqual(self.store.read("timeline_data", {}), {"2026-03-09": [{"start": 1, "end": 5000}]})

    def test_append_today_keeps_order(self):
        self.store.append_today("timeline_data", {"n": 2})
        self.store.append_today("timeline_data", {"n": 1})
        self.assertEqual(self.store.get_today("timeline_data", []), [{"n": 2}, {"n": 1}])

    def test_read_current_today(self):
        self.store.write("project_states", {"date": "2026-03-10", "activeProjectId": "x"})
        self.assertEqual(self.store.read_current("project_states")["activeProjectId"], "x")

    def test_read_current_discards_stale(self):
        self.store.write("timer_state", {"date": "2026-03-09", "elapsed": 99})
        self.assertEqual(self.store.read_current("timer_state", discard_stale=True), {})
        self.assertFalse((Path(self.tmpdir) / "timerState.json").exists())

    def test_read_current_keeps_stale_file_unless_asked(self):
        self.store.write("project_states", {"date": "2026-03-09"})
        self.assertEqual(self.store.read_current("project_states"), {})
        self.assertTrue((Path(self.tmpdir) / "projectStates.json").exists())


# ──────────────────────────────────────────────────────────────────────────
# accumulator.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestAccumulator(unittest.TestCase):

    def test_current_floors_live_portion(self):
        from wt.core.accumulator import Accumulator
        acc = Accumulator(elapsed=10)
        acc.start(1000)
        self.assertEqual(acc.current(2999), 11)
        self.assertEqual(acc.current(3000), 12)

    def test_stop_folds(self):
        from wt.core.accumulator import Accumulator
        acc = Accumulator()
        acc.start(0)
        acc.stop(65_400)
        self.assertEqual(acc.elapsed, 65)
        self.assertFalse(acc.running)

    def test_start_is_idempotent(self):
        from wt.core.accumulator import Accumulator
        acc = Accumulator()
        acc.start(100)
        acc.start(900)
        self.assertEqual(acc.running_since, 100)

    def test_adjust_clamps_to_zero(self):
        from wt.core.accumulator import Accumulator
        acc = Accumulator(elapsed=10)
        acc.adjust(-9999)
        self.assertEqual(acc.elapsed, 0)

    def test_clock_going_backwards_counts_nothing(self):
        from wt.core.accumulator import Accumulator
        acc = Accumulator(elapsed=5)
        acc.start(10_000)
        self.assertEqual(acc.current(4_000), 5)


# ──────────────────────────────────────────────────────────────────────────
# timer.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestMasterTimer(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.clock = FakeClock()
        self.store = _make_store(self.tmpdir, self.clock)
        self.ticker = FakeTicker()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _timer(self, ticker=None):
        from wt.core.timer import MasterTimer
        return MasterTimer(self.store, self.clock, ticker or self.ticker)

    def test_fresh_timer_is_paused_at_zero(self):
        timer = self._timer()
        self.assertFalse(timer.running)
        self.assertEqual(timer.current_elapsed(), 0)
        self.assertEqual(timer.net_adjustment, 0)
        self.assertFalse(self.ticker.active)

    def test_start_schedules_one_second_tick(self):
        timer = self._timer()
        timer.start()
        self.assertTrue(timer.running)
        self.assertTrue(self.ticker.active)
        self.assertEqual(self.ticker.interval_ms, 1000)

    def test_start_twice_keeps_first_stamp(self):
        timer = self._timer()
        timer.start()
        stamp = timer.running_since
        self.clock.advance(5)
        timer.start()
        self.assertEqual(timer.running_since, stamp)
        self.assertEqual(self.ticker.starts, 1)

    def test_pause_folds_and_persists(self):
        timer = self._timer()
        timer.start()
        self.clock.advance(65)
        timer.pause()
        self.assertEqual(timer.acc.elapsed, 65)
        self.assertIsNone(timer.running_since)
        self.assertFalse(self.ticker.active)

        state = self.store.read("timer_state", {})
        self.assertEqual(state["elapsed"], 65)
        self.assertFalse(state["isRunning"])
        self.assertIsNone(state["startTime"])
        self.assertEqual(state["date"], "2026-03-10")
        self.assertEqual(self.store.get_today("work_times", 0), 65)

    def test_pause_when_paused_is_noop(self):
        timer = self._timer()
        calls = []
        timer.subscribe("pause", lambda: calls.append("pause"))
        timer.pause()
        self.assertEqual(calls, [])

    def test_elapsed_monotonic_while_running_constant_while_paused(self):
        timer = self._timer()
        timer.start()
        seen = []
        for _ in range(5):
            self.clock.advance(0.7)
            seen.append(timer.current_elapsed())
        self.assertEqual(seen, sorted(seen))
        timer.pause()
        paused_value = timer.current_elapsed()
        self.clock.advance(100)
        self.assertEqual(timer.current_elapsed(), paused_value)

    def test_tick_updates_display_and_notifies(self):
        timer = self._timer()
        updates = []
        timer.on_update(lambda: updates.append(timer.display))
        timer.start()
        self.clock.advance(61)
        self.ticker.fire()
        self.assertEqual(updates[-1], "00:01:01")

    def test_stale_tick_after_pause_does_nothing(self):
        timer = self._timer()
        timer.start()
        self.clock.advance(3)
        timer.pause()
        updates = []
        timer.on_update(lambda: updates.append(1))
        timer._tick()
        self.assertEqual(updates, [])
        self.assertFalse(timer.running)

    def test_update_callbacks_in_registration_order(self):
        timer = self._timer()
        order = []
        timer.on_update(lambda: order.append("a"))
        timer.on_update(lambda: order.append("b"))
        timer.adjust(60)
        self.assertEqual(order, ["a", "b"])

    def test_subscribe_unknown_event(self):
        timer = self._timer()
        with self.assertRaises(ValueError):
            timer.subscribe("explode", lambda: None)

    def test_adjust_tracks_net_adjustment(self):
        timer = self._timer()
        deltas = []
        timer.subscribe("adjust", deltas.append)
        timer.adjust(600)
        self.assertEqual(timer.current_elapsed(), 600)
        self.assertEqual(timer.net_adjustment, 600)
        self.assertEqual(self.store.get_today("net_adjustments", 0), 600)
        self.assertEqual(deltas, [600])

    def test_adjust_and_undo_restores_values(self):
        timer = self._timer()
        timer.start()
        self.clock.advance(120)
        before = (timer.current_elapsed(), timer.net_adjustment)
        timer.adjust(300)
        timer.adjust(-300)
        self.assertEqual((timer.current_elapsed(), timer.net_adjustment), before)

    def test_adjust_does_not_touch_running_stamp(self):
        timer = self._timer()
        timer.start()
        stamp = timer.running_since
        timer.adjust(60)
        self.assertEqual(timer.running_since, stamp)

    def test_negative_adjust_clamps_silently(self):
        timer = self._timer()
        timer.adjust(30)
        timer.adjust(-600)
        self.assertEqual(timer.current_elapsed(), 0)
        self.assertEqual(timer.net_adjustment, -570)

    def test_net_adjustment_info(self):
        timer = self._timer()
        timer.adjust(5400)
        info = timer.net_adjustment_info()
        self.assertEqual(info.time_str, "+01:30")
        self.assertTrue(info.is_positive)
        timer.adjust(-5460)
        info = timer.net_adjustment_info()
        self.assertEqual(info.time_str, "-00:01")
        self.assertFalse(info.is_positive)

    def test_reset_declined_changes_nothing(self):
        timer = self._timer()
        timer.adjust(100)
        timer.start()
        self.assertFalse(timer.reset(lambda: False))
        self.assertTrue(timer.running)
        self.assertEqual(timer.net_adjustment, 100)
        self.assertTrue(self.ticker.active)

    def test_reset_requires_a_gate(self):
        timer = self._timer()
        timer.adjust(100)
        with self.assertRaises(TypeError):
            timer.reset()
        self.assertEqual(timer.current_elapsed(), 100)

    def test_reset_accepted_clears_everything(self):
        timer = self._timer()
        timer.adjust(100)
        timer.start()
        self.clock.advance(10)
        events = []
        timer.subscribe("reset", lambda: events.append("reset"))

        self.assertTrue(timer.reset(lambda: True))
        self.assertFalse(timer.running)
        self.assertEqual(timer.current_elapsed(), 0)
        self.assertEqual(timer.net_adjustment, 0)
        self.assertFalse(self.ticker.active)
        self.assertEqual(events, ["reset"])
        self.assertEqual(self.store.read("timer_state", {}), {})
        self.assertNotIn("2026-03-10", self.store.read("net_adjustments", {}))

    def test_async_reset_gate(self):
        timer = self._timer()
        timer.adjust(100)

        async def decline():
            return False

        async def accept():
            return True

        self.assertFalse(asyncio.run(timer.areset(decline)))
        self.assertEqual(timer.current_elapsed(), 100)
        self.assertTrue(asyncio.run(timer.areset(accept)))
        self.assertEqual(timer.current_elapsed(), 0)

    def test_resume_running_from_storage(self):
        timer = self._timer()
        timer.start()
        self.clock.advance(30)

        # "Process restart": the time the app was closed still counts.
        self.clock.advance(100)
        ticker = FakeTicker()
        restored = self._timer(ticker)
        self.assertTrue(restored.running)
        self.assertEqual(restored.current_elapsed(), 130)
        self.assertTrue(ticker.active)

    def test_restore_paused_same_day(self):
        timer = self._timer()
        timer.start()
        self.clock.advance(42)
        timer.pause()
        timer.adjust(-2)
        restored = self._timer(FakeTicker())
        self.assertFalse(restored.running)
        self.assertEqual(restored.current_elapsed(), 40)
        self.assertEqual(restored.net_adjustment, -2)

    def test_day_rollover_discards_timer_state(self):
        timer = self._timer()
        timer.start()
        self.clock.advance(100)
        timer.save()

        self.clock.set(datetime(2026, 3, 11, 8, 0, 7))
        ticker = FakeTicker()
        restored = self._timer(ticker)
        self.assertFalse(restored.running)
        self.assertEqual(restored.current_elapsed(), 0)
        self.assertFalse(ticker.active)
        self.assertEqual(self.store.read("timer_state", {}), {})
        # History of the previous day survives
        self.assertEqual(self.store.read("work_times", {})["2026-03-10"], 100)

    def test_save_after_midnight_stays_on_loaded_day(self):
        timer = self._timer()
        timer.adjust(50)
        self.clock.set(datetime(2026, 3, 11, 0, 0, 5))
        timer.save()
        self.assertEqual(self.store.read("work_times", {}), {"2026-03-10": 50})
        self.assertEqual(self.store.read("timer_state", {})["date"], "2026-03-10")

    def test_roll_over_closes_day_and_keeps_running(self):
        from wt.util.misc import day_start_ms
        timer = self._timer()
        timer.adjust(60)
        self.clock.set(datetime(2026, 3, 10, 23, 59, 30))
        timer.start()
        self.clock.set(datetime(2026, 3, 11, 0, 0, 20))
        midnight = day_start_ms("2026-03-11")

        timer.roll_over("2026-03-11", midnight, midnight)
        self.assertEqual(timer.day, "2026-03-11")
        self.assertTrue(timer.running)
        self.assertEqual(timer.running_since, midnight)
        self.assertEqual(timer.current_elapsed(), 20)
        self.assertEqual(timer.net_adjustment, 0)
        self.assertEqual(self.store.read("work_times", {}), {"2026-03-10": 90, "2026-03-11": 20})
        self.assertEqual(self.store.read("net_adjustments", {}), {"2026-03-10": 60, "2026-03-11": 0})
        self.assertTrue(self.ticker.active)

    def test_malformed_timer_state_is_ignored(self):
        self.store.write("timer_state", {"date": "2026-03-10", "elapsed": "lots", "isRunning": True,
                                         "startTime": "soon"})
        self.store.set_today("work_times", 12)
        timer = self._timer()
        self.assertFalse(timer.running)
        self.assertEqual(timer.current_elapsed(), 12)


# ──────────────────────────────────────────────────────────────────────────
# sync.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestSyncReconciler(unittest.TestCase):

    def _project(self, elapsed=0, running_since=None, pid="p1"):
        from wt.core.accumulator import Accumulator
        from wt.core.ledger import Project
        return Project(pid, pid.upper(), "#007bff", Accumulator(elapsed, running_since))

    def test_verify_tolerance_boundary(self):
        from wt.core.sync import SyncReconciler
        rec = SyncReconciler()
        self.assertTrue(rec.verify(100, 103))
        self.assertTrue(rec.verify(103, 100))
        self.assertFalse(rec.verify(100, 104))

    def test_status(self):
        from wt.core.sync import SyncReconciler
        status = SyncReconciler().status(90, 100)
        self.assertFalse(status.in_sync)
        self.assertEqual(status.difference, 10)

    def test_within_tolerance_is_noop(self):
        from wt.core.sync import SyncReconciler
        project = self._project(elapsed=10)
        self.assertEqual(SyncReconciler().reconcile(12, 10, project, False, 0), 0)
        self.assertEqual(project.acc.elapsed, 10)

    def test_no_active_project_stays_unresolved(self):
        from wt.core.sync import SyncReconciler
        with self.assertLogs("worktimer", level="WARNING"):
            self.assertEqual(SyncReconciler().reconcile(50, 10, None, True, 0), 0)

    def test_paused_project_absorbs_difference(self):
        from wt.core.sync import SyncReconciler
        project = self._project(elapsed=10)
        applied = SyncReconciler().reconcile(20, 10, project, False, 5_000)
        self.assertEqual(applied, 10)
        self.assertEqual(project.acc.elapsed, 20)
        self.assertFalse(project.acc.running)

    def test_running_project_restarts_from_now(self):
        from wt.core.sync import SyncReconciler
        project = self._project(elapsed=10, running_since=0)
        now = 5_000
        self.assertEqual(project.current(now), 15)
        SyncReconciler().reconcile(25, 15, project, True, now)
        self.assertEqual(project.acc.elapsed, 25)
        self.assertEqual(project.acc.running_since, now)
        self.assertEqual(project.current(now), 25)

    def test_running_project_stays_stopped_if_master_paused(self):
        from wt.core.sync import SyncReconciler
        project = self._project(elapsed=10, running_since=0)
        SyncReconciler().reconcile(25, 15, project, False, 5_000)
        self.assertFalse(project.acc.running)
        self.assertEqual(project.acc.elapsed, 25)

    def test_correction_clamps_at_zero(self):
        from wt.core.sync import SyncReconciler
        project = self._project(elapsed=2)
        applied = SyncReconciler().reconcile(0, 10, project, False, 0)
        self.assertEqual(project.acc.elapsed, 0)
        self.assertEqual(applied, -2)

    def test_custom_tolerance(self):
        from wt.core.sync import SyncReconciler
        rec = SyncReconciler(tolerance=0)
        self.assertFalse(rec.verify(1, 0))


# ──────────────────────────────────────────────────────────────────────────
# timeline.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestSessionTimeline(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.clock = FakeClock()
        self.store = _make_store(self.tmpdir, self.clock)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _timeline(self):
        from wt.core.timeline import SessionTimeline
        return SessionTimeline(self.store, self.clock)

    def _project(self, running_since=None):
        from wt.core.accumulator import Accumulator
        from wt.core.ledger import Project
        return Project("p1", "Docs", "#007bff", Accumulator(0, running_since))

    def test_short_intervals_are_noise(self):
        timeline = self._timeline()
        project = self._project()
        self.assertIsNone(timeline.record_session_boundary(project, 0, 1000))
        self.assertIsNone(timeline.record_session_boundary(project, 0, 400))
        self.assertEqual(timeline.todays_sessions(), [])

    def test_records_session(self):
        timeline = self._timeline()
        session = timeline.record_session_boundary(self._project(), 1_000, 5_000)
        self.assertEqual(session.duration_ms, 4_000)
        stored = self.store.read("timeline_data", {})["2026-03-10"]
        self.assertEqual(stored, [{"start": 1_000, "end": 5_000, "projectId": "p1",
                                   "projectName": "Docs", "projectColor": "#007bff"}])

    def test_sessions_keep_insertion_order(self):
        timeline = self._timeline()
        project = self._project()
        timeline.record_session_boundary(project, 50_000, 60_000)
        timeline.record_session_boundary(project, 10_000, 20_000)
        self.assertEqual([s.start for s in timeline.todays_sessions()], [50_000, 10_000])

    def test_malformed_entries_are_skipped(self):
        self.store.write("timeline_data", {"2026-03-10": [
            {"start": 5, "end": 2},
            "garbage",
            {"start": 1_000, "end": 9_000, "projectId": "p1"},
        ]})
        with self.assertLogs("worktimer", level="WARNING"):
            sessions = self._timeline().todays_sessions()
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0].project_name, "Unknown project")

    def test_close_open_session(self):
        timeline = self._timeline()
        start = self.clock.now_ms()
        project = self._project(running_since=start)
        self.clock.advance(90)
        session = timeline.close_open_session(project)
        self.assertEqual((session.start, session.end), (start, start + 90_000))

    def test_close_open_session_ignores_paused_project(self):
        self.assertIsNone(self._timeline().close_open_session(self._project()))

    def test_change_callbacks(self):
        timeline = self._timeline()
        changes = []
        timeline.on_change(lambda: changes.append(1))
        timeline.record_session_boundary(self._project(), 0, 500)
        self.assertEqual(changes, [])
        timeline.record_session_boundary(self._project(), 0, 5_000)
        timeline.discard_today()
        self.assertEqual(changes, [1, 1])

    def test_record_into_another_day(self):
        timeline = self._timeline()
        timeline.record_session_boundary(self._project(), 1_000, 5_000, day="2026-03-09")
        self.assertEqual(timeline.todays_sessions(), [])
        self.assertEqual(len(self.store.read("timeline_data", {})["2026-03-09"]), 1)

    def test_discard_today_keeps_history(self):
        self.store.write("timeline_data", {"2026-03-09": [{"start": 0, "end": 5_000}]})
        timeline = self._timeline()
        timeline.record_session_boundary(self._project(), 0, 5_000)
        timeline.discard_today()
        self.assertEqual(timeline.todays_sessions(), [])
        self.assertIn("2026-03-09", self.store.read("timeline_data", {}))

    def test_current_session(self):
        timeline = self._timeline()
        start = self.clock.now_ms()
        project = self._project(running_since=start)
        self.assertIsNone(timeline.current_session(project, master_running=False))
        self.clock.advance(30)
        current = timeline.current_session(project, master_running=True)
        self.assertEqual((current.start, current.end), (start, start + 30_000))

    def test_time_range_pads_an_hour_each_side(self):
        timeline = self._timeline()
        rng = timeline.time_range()
        self.assertEqual((rng.start_hour, rng.end_hour), (8, 11))
        self.assertEqual(rng.duration, 3 * 60 * 60 * 1000)

    def test_time_range_includes_sessions_and_open_start(self):
        timeline = self._timeline()
        day_start = int(datetime(2026, 3, 10).timestamp() * 1000)
        hour = 60 * 60 * 1000
        timeline.record_session_boundary(self._project(), day_start + 6 * hour, day_start + 7 * hour)
        rng = timeline.time_range(open_start=day_start + 5 * hour + 1)
        self.assertEqual(rng.start_hour, 4)
        self.assertEqual(rng.end_hour, 11)

    def test_time_range_clamped_to_day(self):
        self.clock.set(datetime(2026, 3, 10, 23, 30, 0))
        rng = self._timeline().time_range(open_start=int(datetime(2026, 3, 10, 0, 10).timestamp() * 1000))
        self.assertEqual((rng.start_hour, rng.end_hour), (0, 24))


# ──────────────────────────────────────────────────────────────────────────
# misc.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestFormatting(unittest.TestCase):

    def test_format_time(self):
        from wt.util.misc import format_time
        self.assertEqual(format_time(0), "00:00:00")
        self.assertEqual(format_time(3661), "01:01:01")
        self.assertEqual(format_time(-5), "00:00:00")

    def test_format_signed_hm(self):
        from wt.util.misc import format_signed_hm
        self.assertEqual(format_signed_hm(0), "+00:00")
        self.assertEqual(format_signed_hm(-3600 * 2 - 59), "-02:00")

    def test_duration_minutes(self):
        from wt.util.misc import duration_minutes
        self.assertEqual(duration_minutes(0, 90_000), 2)
        self.assertEqual(duration_minutes(0, 60_000), 1)

    def test_day_boundaries(self):
        from wt.util.misc import day_start_ms, next_day
        self.assertEqual(next_day("2026-03-10"), "2026-03-11")
        self.assertEqual(next_day("2026-12-31"), "2027-01-01")
        self.assertEqual(day_start_ms("2026-03-11"), int(datetime(2026, 3, 11).timestamp() * 1000))


if __name__ == "__main__":
    unittest.main()
