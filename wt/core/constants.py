"""Behavioural constants shared by the core components."""

# Colors handed out to new projects, by `project_count % len(PROJECT_COLORS)`.
PROJECT_COLORS = [
    "#28a745", "#007bff", "#dc3545", "#ffc107", "#17a2b8",
    "#6f42c1", "#e83e8c", "#fd7e14", "#20c997", "#6c757d",
]

# The one project that always exists and can never be deleted.
DEFAULT_PROJECT_ID = "general-work"
DEFAULT_PROJECT_NAME = "General Work"
DEFAULT_PROJECT_COLOR = "#28a745"

# Master vs. project-sum drift allowed before a correction is applied.
SYNC_TOLERANCE_SECONDS = 3
# Background auto-correction fires whenever the wall clock's seconds value is a multiple of this.
AUTO_CORRECT_INTERVAL_SECONDS = 30

# Sessions this short (or shorter) are treated as noise and never recorded.
MIN_SESSION_DURATION_MS = 1000

TICK_INTERVAL_MS = 1000
# Ticks between autosaves while running.
AUTOSAVE_EVERY_TICKS = 20
