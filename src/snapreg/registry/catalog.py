"""Registry – ModelCatalog, the per-type registration table.

Each model type is declared once, at process start, with a string tag, an
optional save-order priority and a construction function::

    catalog = ModelCatalog()

    @catalog.model(order=0)
    @dataclasses.dataclass
    class TerrainModel(SnapshotModel):
        seed: int = 0

The tag is what the serializer writes to the artifact, the priority decides
in which order groups are saved, and the factory builds default models.
"""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable, Iterator
from typing import TypeVar

from snapreg.kernel.errors import ConflictError, NotFoundError, ValidationError
from snapreg.kernel.snapshot import SnapshotModel
from snapreg.kernel.types import SMRI_MAX

M = TypeVar("M", bound=SnapshotModel)

#: Priority of types declared without an order, and of unregistered types.
UNORDERED = SMRI_MAX


@dataclasses.dataclass(frozen=True, slots=True)
class ModelType:
    """One catalog entry."""

    tag: str
    model_cls: type[SnapshotModel]
    factory: Callable[[], SnapshotModel]
    order: int | None = None

    @property
    def priority(self) -> int:
        return UNORDERED if self.order is None else self.order


class ModelCatalog:
    """Maps model classes and type tags to their :class:`ModelType`."""

    def __init__(self) -> None:
        self._by_tag: dict[str, ModelType] = {}
        self._by_cls: dict[type[SnapshotModel], ModelType] = {}
        self._lock = threading.Lock()

    def register(
        self,
        model_cls: type[M],
        *,
        tag: str | None = None,
        order: int | None = None,
        factory: Callable[[], M] | None = None,
    ) -> ModelType:
        if not (isinstance(model_cls, type) and issubclass(model_cls, SnapshotModel)):
            raise ValidationError(f"{model_cls!r} is not a SnapshotModel subclass")
        tag = tag or model_cls.__name__
        if order is not None:
            if isinstance(order, bool) or not isinstance(order, int) or not 0 <= order <= UNORDERED:
                raise ValidationError(f"Order of '{tag}' must be an int in [0, {UNORDERED}]")
        entry = ModelType(tag=tag, model_cls=model_cls, factory=factory or model_cls, order=order)
        with self._lock:
            if tag in self._by_tag:
                raise ConflictError(f"Model tag '{tag}' is already registered")
            if model_cls in self._by_cls:
                raise ConflictError(f"{model_cls.__name__} is already registered")
            self._by_tag[tag] = entry
            self._by_cls[model_cls] = entry
        return entry

    def model(
        self,
        tag: str | None = None,
        *,
        order: int | None = None,
    ) -> Callable[[type[M]], type[M]]:
        """Class decorator form of :meth:`register`."""

        def decorator(model_cls: type[M]) -> type[M]:
            self.register(model_cls, tag=tag, order=order)
            return model_cls

        return decorator

    def by_tag(self, tag: str) -> ModelType:
        try:
            return self._by_tag[tag]
        except KeyError:
            raise NotFoundError("Model type", tag) from None

    def by_class(self, model_cls: type[SnapshotModel]) -> ModelType:
        entry = self._by_cls.get(model_cls)
        if entry is None:
            raise NotFoundError("Model type", model_cls.__name__)
        return entry

    def lookup(self, model_cls: type[SnapshotModel]) -> ModelType | None:
        return self._by_cls.get(model_cls)

    def priority(self, model: SnapshotModel) -> int:
        entry = self._by_cls.get(type(model))
        return UNORDERED if entry is None else entry.priority

    def tag_of(self, model: SnapshotModel) -> str:
        cls = type(model)
        entry = self._by_cls.get(cls)
        if entry is None:
            return f"{cls.__module__}.{cls.__qualname__}"
        return entry.tag

    def create(self, model_cls: type[M]) -> M:
        """Build a default model of *model_cls* with an empty reference list.

        Unregistered classes are constructed with no arguments.
        """
        entry = self._by_cls.get(model_cls)
        model = entry.factory() if entry is not None else model_cls()
        if not isinstance(model, model_cls):
            raise ValidationError(
                f"Factory for '{model_cls.__name__}' returned {type(model).__name__}"
            )
        model.ref_smris = []
        return model

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_tag
        return item in self._by_cls

    def __iter__(self) -> Iterator[ModelType]:
        return iter(list(self._by_tag.values()))

    def __len__(self) -> int:
        return len(self._by_tag)


#: Process-wide catalog for applications that declare types at import time.
default_catalog = ModelCatalog()


__all__ = ["UNORDERED", "ModelCatalog", "ModelType", "default_catalog"]
