"""Kernel snapshot – SnapshotModel record."""

from __future__ import annotations

import dataclasses

from snapreg.kernel.types.smri import Smri


@dataclasses.dataclass
class SnapshotModel:
    """Plain data record capturing the persisted state of one snapshot.

    Concrete model types subclass this dataclass and add their own fields,
    each with a default so the type can be default-constructed::

        @catalog.model(order=1)
        @dataclasses.dataclass
        class UnitModel(SnapshotModel):
            name: str = ""
            hp: int = 0

    Only models cross the serialization boundary, so every field must be
    representable by the serializer in use.
    """

    smri: Smri = 0
    ref_smris: list[Smri] = dataclasses.field(default_factory=list)


__all__ = ["SnapshotModel"]
