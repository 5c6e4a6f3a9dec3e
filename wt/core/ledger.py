"""Projects, their per-day time, and the single active-project pointer."""

from dataclasses import dataclass, field
from uuid import uuid4
from wt.common.logger import log
from wt.core.accumulator import Accumulator
from wt.core.constants import (
    DEFAULT_PROJECT_COLOR,
    DEFAULT_PROJECT_ID,
    DEFAULT_PROJECT_NAME,
    PROJECT_COLORS,
)
from wt.util.misc import format_time


@dataclass
class Project:
    id: str
    name: str
    color: str
    acc: Accumulator = field(default_factory=Accumulator)

    @property
    def is_default(self):
        return self.id == DEFAULT_PROJECT_ID

    def current(self, now_ms):
        return self.acc.current(now_ms)

    # What goes into the project list. Times are stored separately, per day.
    def to_record(self):
        return {"id": self.id, "name": self.name, "color": self.color}


def default_project_record():
    return {"id": DEFAULT_PROJECT_ID, "name": DEFAULT_PROJECT_NAME, "color": DEFAULT_PROJECT_COLOR}


# Decides which project is active after a load. Tiers, first hit wins:
#   1. `activeProjectId` from today's project states
#   2. the legacy active-project key
#   3. the default project
# Ids that don't name a known project fall through to the next tier. Returns None only when the default project
# itself is missing.
def resolve_active_project_id(todays_states, legacy_active_id, project_ids):
    known = set(project_ids)
    for candidate in (todays_states.get("activeProjectId"), legacy_active_id):
        if candidate in known:
            return candidate
    return DEFAULT_PROJECT_ID if DEFAULT_PROJECT_ID in known else None


def _valid_record(record):
    return (isinstance(record, dict)
            and isinstance(record.get("id"), str)
            and isinstance(record.get("name"), str)
            and record["name"].strip() != "")


def _as_seconds(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


class ProjectLedger:
    """Ordered projects plus the active pointer.

    At most one project runs at a time and only the active one, and only
    while the master timer runs. The ledger reads the master through its
    public surface (``running``, ``running_since``, ``current_elapsed()``)
    and never changes it.
    """

    def __init__(self, store, clock, master, reconciler):
        self.store = store
        self.clock = clock
        self.master = master
        self.reconciler = reconciler
        self.projects = []
        self.active_project_id = None
        self.day = None

        self._update_callbacks = []
        self._interval_close = []
        self._after_switch = []

        self._load()

    #region === Subscriptions ===

    def on_update(self, callback):
        self._update_callbacks.append(callback)

    # handler(project) runs just before the active project's open interval ends (a switch away from it, or a drift
    # correction restamping it), while its running stamp is still intact.
    def on_interval_close(self, handler):
        self._interval_close.append(handler)

    # handler(incoming_project) runs once the new project is active.
    def on_after_switch(self, handler):
        self._after_switch.append(handler)

    def _trigger_update(self):
        for callback in self._update_callbacks:
            callback()

    #endregion === Subscriptions ===

    #region === Queries ===

    def get(self, project_id):
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    @property
    def active_project(self):
        return self.get(self.active_project_id) if self.active_project_id else None

    @property
    def default_project(self):
        return self.get(DEFAULT_PROJECT_ID)

    def project_times(self):
        now = self.clock.now_ms()
        return {p.id: p.current(now) for p in self.projects}

    def total_elapsed(self):
        now = self.clock.now_ms()
        return sum(p.current(now) for p in self.projects)

    # Logs and returns whether master and project sum agree within tolerance.
    def verify_sync(self):
        master_total = self.master.current_elapsed()
        project_total = self.total_elapsed()
        if self.reconciler.verify(master_total, project_total):
            return True
        log.warning(f"Timer synchronization issue: main {format_time(master_total)}, "
                    f"projects {format_time(project_total)}, diff {abs(master_total - project_total)}s")
        return False

    #endregion === Queries ===

    #region === User operations ===

    def add_project(self, name):
        name = (name or "").strip()
        if not name:
            log.debug("Ignoring add_project with an empty name")
            return None
        if any(p.name == name for p in self.projects):
            log.debug(f"Ignoring add_project for duplicate name '{name}'")
            return None

        color = PROJECT_COLORS[len(self.projects) % len(PROJECT_COLORS)]
        project = Project(uuid4().hex, name, color)
        self.projects.append(project)
        self.save()
        log.info(f"Added new project '{name}' ({project.id})")
        self._trigger_update()
        return project

    # Removes a project, handing all of its time to the default project. If it was active, the default project takes
    # over, still running when the master is.
    def delete_project(self, project_id):
        project = self.get(project_id)
        if project is None or project.is_default:
            log.debug(f"Ignoring delete_project for '{project_id}'")
            return False

        default = self.default_project
        now = self.clock.now_ms()
        former_since = project.acc.running_since
        live = project.acc.live_seconds(now)
        was_active = self.active_project_id == project.id

        project.acc.stop(now)
        default.acc.elapsed += project.acc.elapsed

        if was_active:
            self.active_project_id = default.id
            if self.master.running:
                # The carried stamp keeps counting the live part, so it isn't transferred twice.
                default.acc.elapsed -= live
                default.acc.running_since = former_since if former_since is not None else now

        self.projects.remove(project)
        self.save()
        log.info(f"Deleted project '{project.name}', transferred {project.acc.elapsed}s to '{default.name}'")
        self._trigger_update()
        return True

    def select_project(self, project_id):
        project = self.get(project_id)
        if project is None or project_id == self.active_project_id:
            return False

        # Correct first so drift isn't carried over onto the new project.
        self.sync_to_master()

        outgoing = self.active_project
        if outgoing is not None:
            if outgoing.acc.running:
                for handler in self._interval_close:
                    handler(outgoing)
            outgoing.acc.stop(self.clock.now_ms())
            log.debug(f"Stopped project '{outgoing.name}'")

        self.active_project_id = project.id
        if self.master.running:
            project.acc.start(self.clock.now_ms())
        log.info(f"Switched to project '{project.name}'")

        self.save()
        for handler in self._after_switch:
            handler(project)
        self._trigger_update()
        return True

    # Folds out-of-tolerance drift into the active project. Returns the correction applied. A running active project
    # gets restamped by the correction, so its open interval is closed first.
    def sync_to_master(self):
        master_total = self.master.current_elapsed()
        project_total = self.total_elapsed()
        if self.reconciler.verify(master_total, project_total):
            return 0
        active = self.active_project
        if active is not None and active.acc.running:
            for handler in self._interval_close:
                handler(active)
        applied = self.reconciler.reconcile(
            master_total, project_total, active, self.master.running, self.clock.now_ms()
        )
        if applied:
            self.save()
            self._trigger_update()
        return applied

    #endregion === User operations ===

    #region === Master transitions ===

    def on_master_start(self):
        active = self.active_project
        if active is not None and not active.acc.running:
            active.acc.start(self.master.running_since or self.clock.now_ms())
        self.save()

    def on_master_pause(self):
        active = self.active_project
        if active is not None:
            active.acc.stop(self.clock.now_ms())
        self.save()

    def on_master_reset(self):
        for project in self.projects:
            project.acc.reset()
        default = self.default_project
        self.active_project_id = default.id if default else None
        self.save()

    # Manual corrections belong to whichever project is current.
    def on_master_adjust(self, seconds):
        active = self.active_project
        if active is not None:
            active.acc.adjust(seconds)
        self.save()

    # Closes out the loaded day: every project is folded at `day_end_ms` and its total saved under the old day. All
    # projects then start the new day at zero, the active one resuming from the (already rolled over) master stamp.
    def roll_over(self, new_day, day_end_ms):
        for project in self.projects:
            project.acc.stop(day_end_ms)
        self.save()
        log.info(f"Closed {self.day} for {len(self.projects)} projects")

        self.day = new_day
        for project in self.projects:
            project.acc.reset()
        active = self.active_project
        if self.master.running and active is not None:
            active.acc.start(self.master.running_since)
        self.save()

    #endregion === Master transitions ===

    #region === Persistence ===

    def _load(self):
        saved = self.store.read("projects", [], expect=list)
        records = [r for r in saved if _valid_record(r)]
        if len(records) != len(saved):
            log.warning(f"Dropped {len(saved) - len(records)} malformed project records")
        if not any(r["id"] == DEFAULT_PROJECT_ID for r in records):
            records.insert(0, default_project_record())
            self.store.write("projects", records)

        self.day = self.store.today()
        seen = set()
        times = self.store.get_today("project_times", {}, day=self.day)
        for record in records:
            if record["id"] in seen:
                continue
            seen.add(record["id"])
            color = record.get("color") if isinstance(record.get("color"), str) else DEFAULT_PROJECT_COLOR
            project = Project(record["id"], record["name"].strip(), color)
            project.acc.elapsed = _as_seconds(times.get(project.id))
            self.projects.append(project)

        states = self.store.read_current("project_states")
        timer_states = states.get("projectTimerStates")
        if isinstance(timer_states, list):
            for entry in timer_states:
                if not isinstance(entry, dict):
                    continue
                project = self.get(entry.get("id"))
                if project is None:
                    continue
                project.acc.elapsed = _as_seconds(entry.get("timeToday"))
                start_time = entry.get("startTime")
                project.acc.running_since = int(start_time) if isinstance(start_time, (int, float)) and not isinstance(start_time, bool) else None

        legacy_active = self.store.read("active_project", None, expect=str)
        self.active_project_id = resolve_active_project_id(states, legacy_active, [p.id for p in self.projects])

        active = self.active_project
        if self.master.running and active is not None and not active.acc.running:
            active.acc.running_since = self.master.running_since
        self._enforce_single_runner()
        log.info(f"Projects loaded from storage ({len(self.projects)} projects, active '{self.active_project_id}')")

    # Stored stamps that contradict the master (a stray runner, or a runner while the master is paused) are dropped
    # without folding, since the master never counted that time either.
    def _enforce_single_runner(self):
        for project in self.projects:
            if not project.acc.running:
                continue
            if project.id != self.active_project_id or not self.master.running:
                log.warning(f"Clearing stale running state on project '{project.name}'")
                project.acc.running_since = None

    def save(self):
        now = self.clock.now_ms()
        self.store.write("projects", [p.to_record() for p in self.projects])
        self.store.set_today("project_times", {p.id: p.current(now) for p in self.projects}, day=self.day)
        self.store.write("project_states", {
            "activeProjectId": self.active_project_id,
            "projectTimerStates": [
                {"id": p.id, "timeToday": p.acc.elapsed, "startTime": p.acc.running_since}
                for p in self.projects
            ],
            "date": self.day,
        })
        if self.active_project_id:
            self.store.write("active_project", self.active_project_id)
        else:
            self.store.remove("active_project")

    #endregion === Persistence ===
