import os
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the root data folder. WORKTIMER_HOME wins, then APPDATA (Windows), then a dotfolder in home.
def _data_root() -> Path:
    override = os.getenv("WORKTIMER_HOME")
    if override:
        return Path(override)
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "WorkTimer"
    return Path.home() / ".worktimer"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path
    store: Path

    @staticmethod
    def build():
        data = ensure_directory(_data_root())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        store = ensure_directory(data / "store")

        return ProjectPaths(
            data = data,
            logs = logs,
            store = store
        )
PATHS = ProjectPaths.build()
