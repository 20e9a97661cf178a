"""Registry – model type catalog, snapshot registry, ordering and grouping."""
from snapreg.registry.catalog import UNORDERED, ModelCatalog, ModelType, default_catalog
from snapreg.registry.ordering import group_models, order_and_group, serialization_order
from snapreg.registry.registry import SnapshotRegistry

__all__ = [
    "UNORDERED",
    "ModelCatalog",
    "ModelType",
    "SnapshotRegistry",
    "default_catalog",
    "group_models",
    "order_and_group",
    "serialization_order",
]
