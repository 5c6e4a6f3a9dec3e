import os
import tempfile

# Keep logs and the default store out of the real data folder; must run before anything imports wt.
os.environ.setdefault("WORKTIMER_HOME", tempfile.mkdtemp(prefix="worktimer_test_"))
