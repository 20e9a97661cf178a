"""Registry – SnapshotRegistry.

Holds two parallel maps keyed by SMRI: one for live snapshot handles and one
for their model records.  Registration and updates are fail-fast; a failed
call leaves both maps untouched.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TypeVar, overload

from snapreg.kernel.errors import (
    DuplicateIdentifierError,
    NotFoundError,
    TypeMismatchError,
)
from snapreg.kernel.snapshot import Snapshot, SnapshotModel
from snapreg.kernel.types import Smri, SmriAllocator, validate_smri
from snapreg.observability.logging import get_logger
from snapreg.registry.catalog import ModelCatalog, default_catalog

M = TypeVar("M", bound=SnapshotModel)

logger = get_logger(__name__)


class SnapshotRegistry:
    """Authoritative store of snapshots and models for one application.

    All mutation happens under a re-entrant lock, so snapshots may call back
    into the registry (e.g. :meth:`put_model`) while :meth:`capture` is
    iterating them.

    Parameters
    ----------
    allocator:
        SMRI source.  Each registry gets its own by default.
    catalog:
        Model type table used for construction and ordering.  Defaults to
        :data:`~snapreg.registry.catalog.default_catalog`.
    """

    def __init__(
        self,
        allocator: SmriAllocator | None = None,
        catalog: ModelCatalog | None = None,
    ) -> None:
        self._allocator = allocator or SmriAllocator()
        self._catalog = catalog if catalog is not None else default_catalog
        self._snapshots: dict[Smri, Snapshot] = {}
        self._models: dict[Smri, SnapshotModel] = {}
        self._lock = threading.RLock()

    @property
    def allocator(self) -> SmriAllocator:
        return self._allocator

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog

    @property
    def snapshots(self) -> Mapping[Smri, Snapshot]:
        """Live, read-only view of the registered snapshots."""
        return MappingProxyType(self._snapshots)

    @property
    def models(self) -> Mapping[Smri, SnapshotModel]:
        """Live, read-only view of the registered models."""
        return MappingProxyType(self._models)

    @property
    def current_smri(self) -> Smri:
        return self._allocator.current

    def next_smri(self) -> Smri:
        return self._allocator.next()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_snapshot(self, smri: Smri, snapshot: Snapshot) -> None:
        validate_smri(smri)
        with self._lock:
            if smri in self._snapshots:
                raise DuplicateIdentifierError(smri, "snapshot")
            self._snapshots[smri] = snapshot

    def register_model(self, smri: Smri, model: SnapshotModel) -> None:
        """Insert *model* under *smri* and make the allocator skip past it."""
        validate_smri(smri)
        with self._lock:
            if smri in self._models:
                raise DuplicateIdentifierError(smri, "model")
            model.smri = smri
            self._models[smri] = model
            self._allocator.adopt(smri)

    def register(self, smri: Smri, snapshot: Snapshot, model: SnapshotModel) -> None:
        """Register a snapshot and its model together, or neither."""
        validate_smri(smri)
        with self._lock:
            if smri in self._snapshots:
                raise DuplicateIdentifierError(smri, "snapshot")
            if smri in self._models:
                raise DuplicateIdentifierError(smri, "model")
            self._snapshots[smri] = snapshot
            self.register_model(smri, model)
        logger.debug("snapshot.registered", smri=smri, model=type(model).__name__)

    def create_model(self, smri: Smri, model_cls: type[M]) -> M:
        model = self._catalog.create(model_cls)
        self.register_model(smri, model)
        return model

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @overload
    def get_model(self, smri: Smri) -> SnapshotModel: ...

    @overload
    def get_model(self, smri: Smri, model_cls: type[M]) -> M: ...

    def get_model(self, smri: Smri, model_cls: type[SnapshotModel] = SnapshotModel) -> SnapshotModel:
        model = self._models.get(smri)
        if model is None:
            raise NotFoundError("Model", smri)
        if not isinstance(model, model_cls):
            raise TypeMismatchError(smri, model_cls, type(model))
        return model

    def put_model(self, smri: Smri, model: SnapshotModel) -> None:
        """Replace the model stored at *smri*; never inserts."""
        with self._lock:
            if smri not in self._models:
                raise NotFoundError("Model", smri)
            model.smri = smri
            self._models[smri] = model

    def get_snapshot(self, smri: Smri) -> Snapshot:
        snapshot = self._snapshots.get(smri)
        if snapshot is None:
            raise NotFoundError("Snapshot", smri)
        return snapshot

    def resolve(self, smris: Iterable[Smri]) -> list[Snapshot]:
        """Look up live snapshots for a list of referenced SMRIs, in order."""
        return [self.get_snapshot(smri) for smri in smris]

    def referrers(self, smri: Smri) -> list[Smri]:
        """SMRIs of models whose reference list contains *smri*."""
        with self._lock:
            return [owner for owner, model in self._models.items() if smri in model.ref_smris]

    # ------------------------------------------------------------------
    # Removal / capture
    # ------------------------------------------------------------------

    def remove(self, smri: Smri) -> bool:
        """Drop the snapshot and model for *smri*.  Unknown SMRIs are ignored.

        Other models that still reference *smri* are left as they are.
        """
        with self._lock:
            had_snapshot = self._snapshots.pop(smri, None) is not None
            had_model = self._models.pop(smri, None) is not None
        removed = had_snapshot or had_model
        if removed:
            logger.debug("snapshot.removed", smri=smri)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()
            self._models.clear()

    def capture(self) -> dict[Smri, SnapshotModel]:
        """Ask every snapshot to update its model; return a point-in-time copy.

        Runs entirely under the registry lock, so registrations and removals
        from other threads wait until the copy has been taken.  A snapshot
        must therefore never block in ``update_model`` on a thread that needs
        the registry.  Exceptions raised by a snapshot propagate to the caller.
        """
        with self._lock:
            for snapshot in list(self._snapshots.values()):
                snapshot.update_model()
            captured = copy.deepcopy(self._models)
        logger.info("snapshot.captured", snapshots=len(self._snapshots), models=len(captured))
        return captured

    def __contains__(self, smri: object) -> bool:
        return smri in self._snapshots or smri in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __repr__(self) -> str:
        return (
            f"SnapshotRegistry(snapshots={len(self._snapshots)}, "
            f"models={len(self._models)}, current_smri={self.current_smri})"
        )


__all__ = ["SnapshotRegistry"]
