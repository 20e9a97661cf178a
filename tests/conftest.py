"""Shared pytest fixtures for the snapreg test-suite."""

from __future__ import annotations

from snapreg.testing.fixtures import catalog, registry, snapshot_manager  # noqa: F401
