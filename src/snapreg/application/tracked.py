"""Application – TrackedSnapshot base class."""

from __future__ import annotations

import abc
from typing import ClassVar, Generic, TypeVar

from snapreg.kernel.errors import InvariantViolationError
from snapreg.kernel.snapshot import Snapshot, SnapshotModel
from snapreg.kernel.types import Smri
from snapreg.registry.registry import SnapshotRegistry

M = TypeVar("M", bound=SnapshotModel)


class TrackedSnapshot(abc.ABC, Generic[M]):
    """Base class for application objects whose state is snapshotted.

    Subclasses set :attr:`model_cls`, copy their live state into the model
    in :meth:`capture` and rebuild object references in :meth:`relink`::

        class Unit(TrackedSnapshot[UnitModel]):
            model_cls = UnitModel

            def __init__(self, registry, name=""):
                super().__init__(registry)
                self.name = name
                self.target: Unit | None = None

            def capture(self, model):
                model.name = self.name
                model.ref_smris = [self.target.smri] if self.target else []

            def relink(self, model, references):
                self.name = model.name
                self.target = references[0] if references else None

    New objects call :meth:`register`; objects revived from an artifact call
    :meth:`register_loaded` with the SMRI stored in their model.
    """

    model_cls: ClassVar[type[SnapshotModel]] = SnapshotModel

    def __init__(self, registry: SnapshotRegistry) -> None:
        self._registry = registry
        self._smri: Smri | None = None

    @property
    def registry(self) -> SnapshotRegistry:
        return self._registry

    @property
    def registered(self) -> bool:
        return self._smri is not None

    @property
    def smri(self) -> Smri:
        if self._smri is None:
            raise InvariantViolationError(f"{type(self).__name__} is not registered")
        return self._smri

    @property
    def model(self) -> M:
        return self._registry.get_model(self.smri, self.model_cls)  # type: ignore[return-value]

    def register(self) -> Smri:
        """Register under a freshly allocated SMRI with a default model."""
        self._ensure_unregistered()
        smri = self._registry.next_smri()
        model = self._registry.catalog.create(self.model_cls)
        self._registry.register(smri, self, model)
        self._smri = smri
        return smri

    def register_loaded(self, smri: Smri, model: SnapshotModel) -> Smri:
        """Register under the original *smri* of a deserialized *model*."""
        self._ensure_unregistered()
        self._registry.register(smri, self, model)
        self._smri = smri
        return smri

    def update_model(self) -> None:
        model = self.model
        self.capture(model)
        self._registry.put_model(self.smri, model)

    def resolve_references(self) -> None:
        model = self.model
        self.relink(model, self._registry.resolve(model.ref_smris))

    def remove(self) -> None:
        if self._smri is not None:
            self._registry.remove(self._smri)
            self._smri = None

    @abc.abstractmethod
    def capture(self, model: M) -> None:
        """Copy live state into *model*.

        Runs while the registry lock is held.  Do not block on other threads
        that register, remove or read snapshots; they wait for the capture to
        finish, so the call would deadlock.
        """

    def relink(self, model: M, references: list[Snapshot]) -> None:
        """Restore state from *model*; *references* follow ``model.ref_smris``."""

    def _ensure_unregistered(self) -> None:
        if self._smri is not None:
            raise InvariantViolationError(f"{type(self).__name__} is already registered as {self._smri}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(smri={self._smri})"


__all__ = ["TrackedSnapshot"]
