"""
Cell Balancer Module
====================

Balances measured cells into the series groups of an S×P battery pack so
the weakest group is as close as possible to the strongest.

When building packs from salvaged cells, mismatched parallel groups make the
BMS bleed high groups continuously, and the lowest-capacity group hits the
low-voltage cutoff first, capping the usable capacity of the whole pack.
Finding the perfect split is multiway number partitioning (NP-hard); this
module uses a greedy heuristic that is fast and reproducible.

Usage:
------
    from src.cell_balancer import partition, parse_capacities

    parsed = parse_capacities("2501, 2480, 2550, 2390")
    result = partition(parsed.cells, series_count=2)

    print(result.delta, result.pack_capacity)
    for group in result.groups:
        print(group.label, group.members, group.total)
"""

from .models.group import SeriesGroup
from .models.result import PartitionResult
from .calculations.partition import (
    PartitionPreconditionError,
    partition,
    round_robin_partition,
)
from .input_parser import (
    CellCountStatus,
    ParsedCapacities,
    parse_capacities,
    parse_count,
    check_cell_count,
    required_cell_count,
)
from .data.demo_packs import DemoPack, DEMO_PACKS, DEFAULT_DEMO, get_demo, list_demos
from .export import build_export_text, group_breakdown_rows, export_layout_csv, format_capacity
from .config import BalancerConfig, NOMINAL_CELL_VOLTAGE, DELTA_WARNING_MAH
from .debugger import CalculationDebugger
from .debug_trace import trace_partition

__all__ = [
    # Core
    "partition",
    "round_robin_partition",
    "PartitionPreconditionError",
    # Models
    "SeriesGroup",
    "PartitionResult",
    # Input
    "CellCountStatus",
    "ParsedCapacities",
    "parse_capacities",
    "parse_count",
    "check_cell_count",
    "required_cell_count",
    # Demo data
    "DemoPack",
    "DEMO_PACKS",
    "DEFAULT_DEMO",
    "get_demo",
    "list_demos",
    # Export
    "build_export_text",
    "group_breakdown_rows",
    "export_layout_csv",
    "format_capacity",
    # Config
    "BalancerConfig",
    "NOMINAL_CELL_VOLTAGE",
    "DELTA_WARNING_MAH",
    # Debugger
    "CalculationDebugger",
    "trace_partition",
]
