"""Testing fixtures – pytest fixtures for the snapshot engine."""
from snapreg.testing.fixtures.engine import catalog, registry, snapshot_manager

__all__ = ["catalog", "registry", "snapshot_manager"]
