"""
Partition Result Model
======================

Immutable snapshot of one balancing run: the series groups plus the
pack-level figures derived from them.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .group import SeriesGroup


@dataclass(frozen=True)
class PartitionResult:
    """
    Result of balancing a set of cells into series groups.

    Attributes:
    ----------
    groups : Tuple[SeriesGroup, ...]
        Series groups in index order

    max_total : float
        Highest group capacity (mAh)

    min_total : float
        Lowest group capacity (mAh)

    delta : float
        Spread between highest and lowest group (mAh)

    nominal_cell_voltage : float
        Cell voltage used for the pack voltage figure (V)
    """
    groups: Tuple[SeriesGroup, ...]
    max_total: float
    min_total: float
    delta: float
    nominal_cell_voltage: float

    # =========================================================================
    # Pack Figures
    # =========================================================================

    @property
    def series_count(self) -> int:
        """Number of series groups."""
        return len(self.groups)

    @property
    def cell_count(self) -> int:
        """Total number of cells placed."""
        return sum(g.cell_count for g in self.groups)

    @property
    def pack_voltage(self) -> float:
        """Nominal pack voltage (V)."""
        return self.series_count * self.nominal_cell_voltage

    @property
    def pack_capacity(self) -> float:
        """
        Usable pack capacity (mAh).

        The weakest series group reaches cutoff first, so it bounds
        the whole string.
        """
        return self.min_total

    @property
    def totals(self) -> Tuple[float, ...]:
        """Group capacities in index order."""
        return tuple(g.total for g in self.groups)

    # =========================================================================
    # Spread Statistics
    # =========================================================================

    @property
    def mean_total(self) -> float:
        """Mean group capacity (mAh)."""
        return float(np.mean(self.totals))

    @property
    def std_total(self) -> float:
        """Population standard deviation of group capacities (mAh)."""
        return float(np.std(self.totals))

    @property
    def delta_percent(self) -> float:
        """Spread as a percentage of the highest group."""
        if self.max_total <= 0:
            return 0.0
        return self.delta / self.max_total * 100.0

    # =========================================================================
    # Group Lookup
    # =========================================================================

    @property
    def min_group(self) -> SeriesGroup:
        """First group holding the lowest capacity."""
        return next(g for g in self.groups if g.total == self.min_total)

    @property
    def max_group(self) -> SeriesGroup:
        """First group holding the highest capacity."""
        return next(g for g in self.groups if g.total == self.max_total)

    def is_min_group(self, group: SeriesGroup) -> bool:
        return group.total == self.min_total

    def is_max_group(self, group: SeriesGroup) -> bool:
        return group.total == self.max_total

    def offset_from_min(self, group: SeriesGroup) -> float:
        """Capacity of a group above the weakest group (mAh)."""
        return group.total - self.min_total
