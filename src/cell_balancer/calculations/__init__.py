"""
Cell Balancer Calculations Module
=================================

Pure functions for balancing cells into series groups.
"""

from .partition import (
    PartitionPreconditionError,
    sort_cells_descending,
    build_result,
    partition,
    round_robin_partition,
)

__all__ = [
    "PartitionPreconditionError",
    "sort_cells_descending",
    "build_result",
    "partition",
    "round_robin_partition",
]
