"""Application – manager facade, snapshot base class and two-phase loading."""
from snapreg.application.loading import LoadSession, Reviver, flatten_groups, load_snapshots
from snapreg.application.manager import SnapshotManager
from snapreg.application.tracked import TrackedSnapshot

__all__ = [
    "LoadSession",
    "Reviver",
    "SnapshotManager",
    "TrackedSnapshot",
    "flatten_groups",
    "load_snapshots",
]
