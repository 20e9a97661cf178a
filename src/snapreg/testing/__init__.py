"""Testing support – fakes, fixtures and property-based strategies.

Import in your ``conftest.py``::

    pytest_plugins = ["snapreg.testing.fixtures"]
"""

from snapreg.testing.fakes import FakeClock, RecordingObserver
from snapreg.testing.generators import (
    allocator_ops_strategy,
    reference_graph_strategy,
    smri_strategy,
)

__all__ = [
    "FakeClock",
    "RecordingObserver",
    "allocator_ops_strategy",
    "reference_graph_strategy",
    "smri_strategy",
]
