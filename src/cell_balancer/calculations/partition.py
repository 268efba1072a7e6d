"""
Series Group Partitioning
=========================

Greedy balancing of measured cells into series groups.

Splitting cells into S groups with equal capacity is multiway number
partitioning, which is NP-hard. The greedy longest-processing-time (LPT)
heuristic used here is fast, deterministic and lands close to optimal for
pack sizes built on a workbench:

1. Sort capacities in descending order (stable, ties keep input order)
2. Start with S empty groups
3. Give each cell to the group with the lowest running total
   (lowest index wins on equal totals)
"""

import heapq
from typing import List, Sequence, Tuple

from ..config import NOMINAL_CELL_VOLTAGE
from ..models.group import SeriesGroup
from ..models.result import PartitionResult


class PartitionPreconditionError(ValueError):
    """Raised when partition() is called with a degenerate configuration."""


def _check_preconditions(cells: Sequence[float], series_count: int):
    if series_count < 1:
        raise PartitionPreconditionError(
            f"Precondition violated: series count must be >= 1, got {series_count}"
        )
    if len(cells) == 0:
        raise PartitionPreconditionError(
            "Precondition violated: at least one cell capacity is required"
        )


def sort_cells_descending(cells: Sequence[float]) -> List[Tuple[int, float]]:
    """
    Order cells for assignment, largest first.

    Parameters:
    ----------
    cells : Sequence[float]
        Measured capacities (mAh)

    Returns:
    -------
    List[Tuple[int, float]]
        (input index, capacity) pairs, descending by capacity.
        Equal capacities keep their input order.
    """
    return sorted(enumerate(cells), key=lambda item: -item[1])


def _lowest_group_scan(totals: List[float]) -> int:
    lowest = 0
    for i in range(1, len(totals)):
        if totals[i] < totals[lowest]:
            lowest = i
    return lowest


def _assign_linear(order, members, indices, totals):
    for cell_index, capacity in order:
        target = _lowest_group_scan(totals)
        members[target].append(capacity)
        indices[target].append(cell_index)
        totals[target] += capacity


def _assign_heap(order, members, indices, totals):
    # Heap entries are (total, group index) so equal totals pop lowest index first
    heap = [(0, i) for i in range(len(totals))]
    for cell_index, capacity in order:
        _, target = heapq.heappop(heap)
        members[target].append(capacity)
        indices[target].append(cell_index)
        totals[target] += capacity
        heapq.heappush(heap, (totals[target], target))


def build_result(
    members: List[List[float]],
    indices: List[List[int]],
    nominal_cell_voltage: float = NOMINAL_CELL_VOLTAGE
) -> PartitionResult:
    """
    Freeze per-group assignments into a PartitionResult.

    Parameters:
    ----------
    members : List[List[float]]
        Capacities per group, in assignment order

    indices : List[List[int]]
        Input positions per group, parallel to ``members``

    nominal_cell_voltage : float
        Cell voltage for the pack voltage figure (V)

    Returns:
    -------
    PartitionResult
        Groups plus max/min/delta statistics
    """
    groups = tuple(
        SeriesGroup(index=i + 1, members=tuple(m), cell_indices=tuple(idx))
        for i, (m, idx) in enumerate(zip(members, indices))
    )
    totals = [g.total for g in groups]
    max_total = max(totals)
    min_total = min(totals)

    return PartitionResult(
        groups=groups,
        max_total=max_total,
        min_total=min_total,
        delta=max_total - min_total,
        nominal_cell_voltage=nominal_cell_voltage,
    )


def partition(
    cells: Sequence[float],
    series_count: int,
    nominal_cell_voltage: float = NOMINAL_CELL_VOLTAGE,
    use_heap: bool = False
) -> PartitionResult:
    """
    Balance cells into series groups with the greedy LPT heuristic.

    Input is expected to be pre-validated: positive finite capacities,
    and normally len(cells) == series × parallel. A count that does not
    divide evenly still partitions, with uneven group sizes.

    Parameters:
    ----------
    cells : Sequence[float]
        Measured cell capacities (mAh)

    series_count : int
        Number of series groups (S)

    nominal_cell_voltage : float
        Nominal single-cell voltage (V)

    use_heap : bool
        Look up the lowest group with a min-heap instead of a linear scan.
        The layout is identical either way.

    Returns:
    -------
    PartitionResult
        Balanced layout and pack statistics

    Raises:
    ------
    PartitionPreconditionError
        If series_count < 1 or cells is empty
    """
    _check_preconditions(cells, series_count)

    order = sort_cells_descending(cells)
    members: List[List[float]] = [[] for _ in range(series_count)]
    indices: List[List[int]] = [[] for _ in range(series_count)]
    totals: List[float] = [0] * series_count

    assign = _assign_heap if use_heap else _assign_linear
    assign(order, members, indices, totals)

    return build_result(members, indices, nominal_cell_voltage)


def round_robin_partition(
    cells: Sequence[float],
    series_count: int,
    nominal_cell_voltage: float = NOMINAL_CELL_VOLTAGE
) -> PartitionResult:
    """
    Deal cells to groups in input order (1, 2, ..., S, 1, 2, ...).

    This is what an unbalanced build would look like. It serves as a
    baseline for judging the greedy layout.

    Raises:
    ------
    PartitionPreconditionError
        If series_count < 1 or cells is empty
    """
    _check_preconditions(cells, series_count)

    members: List[List[float]] = [[] for _ in range(series_count)]
    indices: List[List[int]] = [[] for _ in range(series_count)]
    for cell_index, capacity in enumerate(cells):
        target = cell_index % series_count
        members[target].append(capacity)
        indices[target].append(cell_index)

    return build_result(members, indices, nominal_cell_voltage)
