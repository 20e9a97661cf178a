"""Registry – deterministic save order and type grouping.

Models are first stable-sorted by the priority of their type, then
partitioned by type tag.  Groups come out in first-appearance order after
the sort, so a lower-priority type is always emitted before a higher one,
and types without a declared priority come last in insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from snapreg.kernel.snapshot import SnapshotModel
from snapreg.kernel.types import Smri
from snapreg.registry.catalog import ModelCatalog


def serialization_order(
    models: Mapping[Smri, SnapshotModel],
    catalog: ModelCatalog,
) -> list[tuple[Smri, SnapshotModel]]:
    return sorted(models.items(), key=lambda item: catalog.priority(item[1]))


def group_models(
    ordered: Iterable[tuple[Smri, SnapshotModel]],
    catalog: ModelCatalog,
) -> dict[str, list[SnapshotModel]]:
    groups: dict[str, list[SnapshotModel]] = {}
    for _, model in ordered:
        groups.setdefault(catalog.tag_of(model), []).append(model)
    return groups


def order_and_group(
    models: Mapping[Smri, SnapshotModel],
    catalog: ModelCatalog,
) -> dict[str, list[SnapshotModel]]:
    """Sort *models* by type priority and group them by type tag."""
    return group_models(serialization_order(models, catalog), catalog)


__all__ = ["group_models", "order_and_group", "serialization_order"]
