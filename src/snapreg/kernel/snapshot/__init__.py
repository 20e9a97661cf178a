"""Kernel snapshot – model record and snapshot ports."""
from snapreg.kernel.snapshot.model import SnapshotModel
from snapreg.kernel.snapshot.protocol import LoadableSnapshot, Snapshot

__all__ = ["LoadableSnapshot", "Snapshot", "SnapshotModel"]
