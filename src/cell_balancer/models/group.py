"""
Series Group Model
==================

A series group is the set of parallel-connected cells that forms one
series stage of the pack. Its capacity is the sum of its cells.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SeriesGroup:
    """
    One series group of a balanced pack.

    Attributes:
    ----------
    index : int
        1-based group position (display only)

    members : Tuple[float, ...]
        Cell capacities (mAh) in the order they were assigned

    cell_indices : Tuple[int, ...]
        0-based positions of the members in the measured input,
        parallel to ``members``
    """
    index: int
    members: Tuple[float, ...] = ()
    cell_indices: Tuple[int, ...] = ()

    @property
    def total(self) -> float:
        """Group capacity (mAh)."""
        return sum(self.members)

    @property
    def cell_count(self) -> int:
        """Number of cells in the group."""
        return len(self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    @property
    def label(self) -> str:
        """Short group label (e.g., 'S3')."""
        return f"S{self.index}"
