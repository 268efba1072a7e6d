"""
Debug Trace Functions
=====================

Traces a balancing run step by step: inputs, sort order, every cell
assignment with the running group totals, and the final statistics
compared against an unbalanced round-robin build.
"""

from typing import Dict, Optional, Sequence

from .calculations.partition import (
    partition,
    round_robin_partition,
    sort_cells_descending,
)
from .config import BalancerConfig
from .debugger import CalculationDebugger
from .export import format_capacity
from .models.result import PartitionResult


def _record_assignments(
    debugger: CalculationDebugger,
    cells: Sequence[float],
    result: PartitionResult
):
    group_of: Dict[int, int] = {}
    for group in result.groups:
        for cell_index in group.cell_indices:
            group_of[cell_index] = group.index

    running = {group.index: 0 for group in result.groups}
    for step, (cell_index, capacity) in enumerate(sort_cells_descending(cells), start=1):
        target = group_of[cell_index]
        before = running[target]
        running[target] = before + capacity
        debugger.add_step(
            category="Assign",
            description=f"Step {step}: cell #{cell_index + 1} ({format_capacity(capacity)} mAh) -> S{target}",
            variables={
                "capacity": capacity,
                f"S{target}_before": before,
                "lowest_after": min(running.values()),
            },
            result=running[target],
            result_name=f"S{target}_total",
            result_unit="mAh",
        )


def trace_partition(
    cells: Sequence[float],
    series: int,
    parallel: int,
    config: Optional[BalancerConfig] = None
) -> CalculationDebugger:
    """
    Trace a balancing run with detailed step-by-step output.

    Parameters:
    ----------
    cells : Sequence[float]
        Measured capacities (mAh), already validated

    series : int
        Series group count (S)

    parallel : int
        Cells per group (P), for reporting

    config : BalancerConfig, optional
        Balancer settings (defaults if omitted)

    Returns:
    -------
    CalculationDebugger
        Debugger with all steps recorded

    Raises:
    ------
    ValueError
        If the configuration fails validation
    """
    config = config or BalancerConfig()
    valid, errors = config.validate()
    if not valid:
        raise ValueError(f"Invalid balancer configuration: {errors}")

    debugger = CalculationDebugger()
    debugger.start(
        configuration=f"{series}S{parallel}P",
        cells=len(cells),
        lookup="min-heap" if config.use_heap else "linear scan",
    )

    result = partition(
        cells, series,
        nominal_cell_voltage=config.nominal_cell_voltage,
        use_heap=config.use_heap,
    )

    # ==========================================================================
    # SECTION 1: INPUTS
    # ==========================================================================
    debugger.start_section("INPUT PARAMETERS")
    debugger.add_input("S", series, description="Series group count")
    debugger.add_input("P", parallel, description="Cells per group")
    debugger.add_input("V_cell", config.nominal_cell_voltage, "V", "Nominal cell voltage")
    debugger.add_input("sum_cells", float(sum(cells)), "mAh", "Total measured capacity")

    # ==========================================================================
    # SECTION 2: SORT
    # ==========================================================================
    debugger.start_section("SORT (DESCENDING)")
    order = sort_cells_descending(cells)
    debugger.add_step(
        category="Sort",
        description="Order cells largest first, ties in input order",
        variables={"n": len(cells)},
        result=", ".join(format_capacity(c) for _, c in order),
        result_name="sorted",
        result_unit="mAh",
    )

    # ==========================================================================
    # SECTION 3: ASSIGNMENT
    # ==========================================================================
    debugger.start_section("GREEDY ASSIGNMENT")
    _record_assignments(debugger, cells, result)

    # ==========================================================================
    # SECTION 4: RESULTS
    # ==========================================================================
    debugger.start_section("PACK RESULTS")
    for group in result.groups:
        debugger.add_step(
            category="Result",
            description=f"Group {group.label} ({group.cell_count} cells)",
            variables={"cells": " + ".join(format_capacity(c) for c in group.members) or "-"},
            result=group.total,
            result_name=f"{group.label}_total",
            result_unit="mAh",
        )

    debugger.add_step(
        category="Result",
        description="Spread between strongest and weakest group",
        variables={"max_total": result.max_total, "min_total": result.min_total},
        result=result.delta,
        result_name="delta",
        result_unit="mAh",
        comment=(
            f"Exceeds {format_capacity(config.delta_warning_mah)} mAh warning threshold"
            if config.is_delta_excessive(result.delta) else ""
        ),
    )
    debugger.add_step(
        category="Result",
        description="Pack voltage",
        variables={"S": series, "V_cell": config.nominal_cell_voltage},
        result=result.pack_voltage,
        result_name="V_pack",
        result_unit="V",
    )
    debugger.add_step(
        category="Result",
        description="Pack capacity (bounded by weakest group)",
        variables={"min_total": result.min_total},
        result=result.pack_capacity,
        result_name="C_pack",
        result_unit="mAh",
    )

    # ==========================================================================
    # SECTION 5: BASELINE
    # ==========================================================================
    debugger.start_section("BASELINE COMPARISON")
    baseline = round_robin_partition(cells, series, config.nominal_cell_voltage)
    debugger.add_step(
        category="Baseline",
        description="Round-robin build in input order",
        variables={"max_total": baseline.max_total, "min_total": baseline.min_total},
        result=baseline.delta,
        result_name="delta_round_robin",
        result_unit="mAh",
    )
    debugger.add_step(
        category="Baseline",
        description="Spread reduction from balancing",
        variables={"delta_round_robin": baseline.delta, "delta": result.delta},
        result=baseline.delta - result.delta,
        result_name="delta_saved",
        result_unit="mAh",
    )

    debugger.finish()
    return debugger
