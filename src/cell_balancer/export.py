"""
Layout Export
=============

Formats a balanced layout for the workbench: a plain-text block for the
clipboard, table rows for display, and a per-cell CSV file.
"""

import csv
from typing import Any, Dict, List

from .config import EXPORT_RULE_WIDTH, EXPORT_TITLE
from .models.group import SeriesGroup
from .models.result import PartitionResult


def format_capacity(value: float) -> str:
    """
    Format a capacity for display or export.

    Whole values print without a trailing '.0'; anything else prints
    unrounded so exported measurements match the input.
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def group_tag(result: PartitionResult, group: SeriesGroup) -> str:
    """Tag a group as the min, the max, or its offset above the min."""
    if result.is_min_group(group):
        return "▼ min"
    if result.is_max_group(group):
        return "▲ max"
    return f"+{format_capacity(result.offset_from_min(group))}"


def build_export_text(result: PartitionResult, series: int, parallel: int) -> str:
    """
    Build the plain-text pack layout.

    Parameters:
    ----------
    result : PartitionResult
        Balanced layout

    series : int
        Series count (S), for the config line

    parallel : int
        Parallel count (P), for the config line

    Returns:
    -------
    str
        Multi-line layout text
    """
    rule = "─" * EXPORT_RULE_WIDTH
    lines = [
        EXPORT_TITLE,
        (
            f"Config: {series}S{parallel}P  |  "
            f"Voltage: {result.pack_voltage:.1f}V  |  "
            f"Capacity: {format_capacity(result.pack_capacity)} mAh  |  "
            f"Δ: {format_capacity(result.delta)} mAh"
        ),
        rule,
    ]
    for group in result.groups:
        cells = ", ".join(format_capacity(c) for c in group.members)
        lines.append(
            f"Group {group.index}:  [{cells}]  →  {format_capacity(group.total)} mAh"
        )
    lines.append(rule)
    return "\n".join(lines)


def group_breakdown_rows(result: PartitionResult) -> List[Dict[str, str]]:
    """
    Rows for the group breakdown table.

    Returns:
    -------
    List[Dict[str, str]]
        One row per group with keys: group, cells, total, tag
    """
    return [
        {
            "group": group.label,
            "cells": "  ·  ".join(format_capacity(c) for c in group.members),
            "total": format_capacity(group.total),
            "tag": group_tag(result, group),
        }
        for group in result.groups
    ]


def export_layout_csv(result: PartitionResult, filepath: str):
    """
    Export the layout as one CSV row per cell.

    Parameters:
    ----------
    result : PartitionResult
        Balanced layout

    filepath : str
        Path to CSV file
    """
    columns = [
        "group", "position", "input_index", "capacity_mah", "group_total_mah",
    ]

    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()

        for group in result.groups:
            group_total = group.total
            for position, (cell_index, capacity) in enumerate(
                zip(group.cell_indices, group.members), start=1
            ):
                row: Dict[str, Any] = {
                    "group": group.index,
                    "position": position,
                    "input_index": cell_index,
                    "capacity_mah": format_capacity(capacity),
                    "group_total_mah": format_capacity(group_total),
                }
                writer.writerow(row)
