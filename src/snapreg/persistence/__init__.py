"""Persistence – serializer port, artifact storage and the save pipeline."""
from snapreg.persistence.pipeline import CompletionObserver, SavePipeline, SnapshotResult
from snapreg.persistence.serializer import ModelGroups, MsgpackSerializer, Serializer
from snapreg.persistence.storage import atomic_write_bytes, ensure_dir, read_bytes

__all__ = [
    "CompletionObserver",
    "ModelGroups",
    "MsgpackSerializer",
    "SavePipeline",
    "Serializer",
    "SnapshotResult",
    "atomic_write_bytes",
    "ensure_dir",
    "read_bytes",
]
