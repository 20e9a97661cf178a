"""
snapreg – snapshot registry and ordered serialization engine.

Import path convention::

    from snapreg.kernel.errors import DuplicateIdentifierError
    from snapreg.kernel.snapshot import SnapshotModel
    from snapreg.registry import ModelCatalog, SnapshotRegistry
    from snapreg.application import SnapshotManager, TrackedSnapshot
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
