"""Drift detection and correction between the master timer and the project sum.

Master and project totals are floored independently at slightly different
instants, so they wander apart by a second or two. Anything within tolerance
is noise; beyond that the whole difference is folded into whichever project
is active.
"""

from typing import NamedTuple
from wt.common.logger import log
from wt.core.constants import SYNC_TOLERANCE_SECONDS
from wt.util.misc import format_time


class DriftStatus(NamedTuple):
    in_sync: bool
    difference: int


class SyncReconciler:

    def __init__(self, tolerance=SYNC_TOLERANCE_SECONDS):
        self.tolerance = tolerance

    def verify(self, master, project_sum):
        return abs(master - project_sum) <= self.tolerance

    def status(self, master, project_sum):
        return DriftStatus(self.verify(master, project_sum), abs(master - project_sum))

    # Folds `master - project_sum` into the active project's folded total. Returns the applied correction (0 when
    # nothing was done). If the project was running and the master still is, it keeps running from `now_ms`.
    def reconcile(self, master, project_sum, active_project, master_running, now_ms):
        diff = master - project_sum
        if abs(diff) <= self.tolerance:
            return 0
        if active_project is None:
            log.warning(f"Timer drift of {diff}s left unresolved: no active project to absorb it "
                        f"(main {format_time(master)}, projects {format_time(project_sum)})")
            return 0

        acc = active_project.acc
        was_running = acc.running
        if was_running:
            acc.stop(now_ms)

        before = acc.elapsed
        acc.adjust(diff)
        applied = acc.elapsed - before

        if was_running and master_running:
            acc.start(now_ms)

        log.info(f"Synchronized timers: applied {applied}s correction to {active_project.name}")
        return applied
