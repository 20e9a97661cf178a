"""Application – two-phase load with reference resolution.

Phase 1 registers every decoded model, together with the snapshot revived
from it, under the model's original SMRI.  Phase 2 runs only once nothing
referenced is missing, and asks each snapshot to resolve its references.
Self references and cycles need no special handling.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence

from snapreg.kernel.errors import InvariantViolationError, UnresolvedReferenceError
from snapreg.kernel.snapshot import LoadableSnapshot, SnapshotModel
from snapreg.kernel.types import Smri
from snapreg.observability.logging import get_logger
from snapreg.registry.registry import SnapshotRegistry

logger = get_logger(__name__)

#: Builds (or revives) the live snapshot for a decoded model.  It must not
#: register the snapshot itself; the session does that.
Reviver = Callable[[SnapshotModel], LoadableSnapshot]


def flatten_groups(
    models: Mapping[str, Sequence[SnapshotModel]] | Iterable[SnapshotModel],
) -> list[SnapshotModel]:
    """Accept decoded groups or a flat iterable; return models in order."""
    if isinstance(models, Mapping):
        return [model for group in models.values() for model in group]
    return list(models)


class LoadSession:
    """Drives one two-phase load into *registry*.

    Example::

        session = LoadSession(registry)
        session.load_all(serializer.decode(data), revive)
        session.resolve()
    """

    def __init__(self, registry: SnapshotRegistry) -> None:
        self._registry = registry
        self._loaded: list[LoadableSnapshot] = []
        self._resolved = False

    @property
    def loaded(self) -> list[LoadableSnapshot]:
        return list(self._loaded)

    @property
    def resolved(self) -> bool:
        return self._resolved

    def load(self, model: SnapshotModel, revive: Reviver) -> LoadableSnapshot:
        if self._resolved:
            raise InvariantViolationError("Load session already resolved")
        snapshot = revive(model)
        snapshot.register_loaded(model.smri, model)
        self._loaded.append(snapshot)
        return snapshot

    def load_all(
        self,
        models: Mapping[str, Sequence[SnapshotModel]] | Iterable[SnapshotModel],
        revive: Reviver,
    ) -> list[LoadableSnapshot]:
        return [self.load(model, revive) for model in flatten_groups(models)]

    def missing_references(self) -> set[Smri]:
        """Referenced SMRIs that have no registered snapshot yet."""
        snapshots = self._registry.snapshots
        missing: set[Smri] = set()
        for snapshot in self._loaded:
            model = self._registry.get_model(snapshot.smri)
            missing.update(smri for smri in model.ref_smris if smri not in snapshots)
        return missing

    def resolve(self) -> list[LoadableSnapshot]:
        """Resolve references of every loaded snapshot.

        Raises :class:`UnresolvedReferenceError` before touching any snapshot
        when a referenced SMRI is not registered.
        """
        if self._resolved:
            raise InvariantViolationError("Load session already resolved")
        missing = self.missing_references()
        if missing:
            raise UnresolvedReferenceError(missing)
        for snapshot in self._loaded:
            snapshot.resolve_references()
        self._resolved = True
        logger.info("snapshot.resolved", snapshots=len(self._loaded))
        return list(self._loaded)


def load_snapshots(
    registry: SnapshotRegistry,
    models: Mapping[str, Sequence[SnapshotModel]] | Iterable[SnapshotModel],
    revive: Reviver,
) -> list[LoadableSnapshot]:
    """Run both load phases for *models* and return the revived snapshots."""
    session = LoadSession(registry)
    loaded = session.load_all(models, revive)
    logger.info("snapshot.loaded", snapshots=len(loaded), current_smri=registry.current_smri)
    return session.resolve()


__all__ = ["LoadSession", "Reviver", "flatten_groups", "load_snapshots"]
