"""Testing generators – Hypothesis strategies for engine inputs."""
from snapreg.testing.generators.strategies import (
    allocator_ops_strategy,
    reference_graph_strategy,
    smri_strategy,
)

__all__ = ["allocator_ops_strategy", "reference_graph_strategy", "smri_strategy"]
