"""Kernel snapshot – ports implemented by the owning application's objects."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from snapreg.kernel.snapshot.model import SnapshotModel
from snapreg.kernel.types.smri import Smri


@runtime_checkable
class Snapshot(Protocol):
    """Port: a live stateful object tracked by the registry."""

    @property
    def smri(self) -> Smri: ...

    def update_model(self) -> None:
        """Push the current live state into the associated model.

        Called by :meth:`SnapshotRegistry.capture` with the registry lock
        held.  It may call back into the registry on the same thread, but
        must not wait on another thread that needs the registry.
        """
        ...


@runtime_checkable
class LoadableSnapshot(Snapshot, Protocol):
    """Port: a snapshot that can be revived from a deserialized model."""

    def register_loaded(self, smri: Smri, model: SnapshotModel) -> Smri:
        """Register under the original *smri* with its loaded *model*."""
        ...

    def resolve_references(self) -> None:
        """Turn the model's ``ref_smris`` into live references."""
        ...


__all__ = ["LoadableSnapshot", "Snapshot"]
