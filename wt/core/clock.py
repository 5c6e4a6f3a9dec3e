"""Wall-clock access and periodic tick scheduling.

Every core component reads time through a clock object so that a whole
tracker can be driven deterministically. Timestamps are epoch milliseconds,
matching what ends up in the store.
"""

import time
from datetime import date, datetime
from PySide6.QtCore import QTimer
from wt.common.logger import log


class SystemClock:
    """The real clock: epoch milliseconds plus the local calendar day."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.now_ms() / 1000)

    def today(self) -> str:
        return date.today().isoformat()


# Recurring tick backed by a QTimer, so ticks are delivered on the Qt event loop like every other event.
class QtTicker:

    def __init__(self, parent=None):
        self._timer = QTimer(parent)
        self._callback = None
        self._timer.timeout.connect(self._fire)

    @property
    def active(self):
        return self._timer.isActive()

    def start(self, callback, interval_ms):
        self._callback = callback
        self._timer.start(interval_ms)
        log.debug(f"Ticker started with interval {interval_ms}ms")

    # Stopping is synchronous: once this returns, no queued timeout will reach the old callback.
    def stop(self):
        if self._timer.isActive():
            self._timer.stop()
            log.debug("Ticker stopped")
        self._callback = None

    def _fire(self):
        if self._callback is not None:
            self._callback()
