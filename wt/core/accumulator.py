"""One running/paused counter: folded seconds plus an optional running-since stamp."""


class Accumulator:
    """Tracks whole elapsed seconds for one counter.

    ``elapsed`` holds the folded seconds. ``running_since`` is the epoch-ms
    stamp the live portion started at, or None while paused. The current
    value is always floored to whole seconds, exactly like the stored
    totals.
    """

    def __init__(self, elapsed=0, running_since=None):
        self.elapsed = max(0, int(elapsed))
        self.running_since = running_since

    @property
    def running(self):
        return self.running_since is not None

    def live_seconds(self, now_ms):
        if self.running_since is None:
            return 0
        return max(0, (now_ms - self.running_since) // 1000)

    def current(self, now_ms):
        return self.elapsed + self.live_seconds(now_ms)

    def start(self, now_ms):
        if self.running_since is None:
            self.running_since = now_ms

    def stop(self, now_ms):
        """Fold the live portion into elapsed and pause."""
        if self.running_since is not None:
            self.elapsed += self.live_seconds(now_ms)
            self.running_since = None

    def adjust(self, seconds):
        self.elapsed = max(0, self.elapsed + int(seconds))

    def reset(self):
        self.elapsed = 0
        self.running_since = None

    def __repr__(self):
        return f"Accumulator(elapsed={self.elapsed}, running_since={self.running_since})"
