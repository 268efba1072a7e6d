"""
Capacity Input Parsing
======================

Turns pasted measurement text into cell capacities and checks the count
against the requested pack topology before balancing is allowed.

Accepted input is any mix of comma, space, tab or newline separated
values, e.g. ``2501, 2480\\n2550 2390``.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .config import MIN_PARALLEL, MIN_SERIES


_TOKEN_SPLIT = re.compile(r"[\s,]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class CellCountStatus(Enum):
    """State of the supplied cell count relative to S × P."""
    UNCONFIGURED = "unconfigured"   # S or P missing/zero
    SHORT = "short"                 # Fewer cells than required
    READY = "ready"                 # Exact match
    OVER = "over"                   # More cells than required

    @property
    def is_ready(self) -> bool:
        return self is CellCountStatus.READY

    @staticmethod
    def label(provided: int, required: int) -> str:
        """Counter text (e.g., '18 / 20')."""
        return f"{provided} / {required if required > 0 else '—'}"


@dataclass
class ParsedCapacities:
    """
    Result of parsing capacity text.

    Attributes:
    ----------
    cells : List[float]
        Accepted capacities (mAh), in input order

    rejected : List[str]
        Tokens that were not positive finite numbers
    """
    cells: List[float] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.cells)

    def rejection_message(self, limit: int = 5) -> str:
        """Status text listing ignored tokens, or '' when all were accepted."""
        if not self.rejected:
            return ""
        shown = ", ".join(self.rejected[:limit])
        more = "..." if len(self.rejected) > limit else ""
        return f"Ignored {len(self.rejected)} invalid value(s): {shown}{more}"


def _parse_capacity(token: str):
    # float() accepts digit separators like "1_000"; measurements never use them
    if "_" in token:
        return None
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def parse_capacities(text: str) -> ParsedCapacities:
    """
    Parse free-form capacity text.

    Parameters:
    ----------
    text : str
        Comma and/or whitespace separated values

    Returns:
    -------
    ParsedCapacities
        Accepted capacities and rejected tokens
    """
    parsed = ParsedCapacities()
    if not text or not text.strip():
        return parsed

    for token in _TOKEN_SPLIT.split(text.strip()):
        if not token:
            continue
        value = _parse_capacity(token)
        if value is None:
            parsed.rejected.append(token)
        else:
            parsed.cells.append(value)

    return parsed


def parse_count(text: str) -> int:
    """
    Parse a series/parallel field.

    Reads the leading integer, so "4.5" or "4s" give 4. Empty text,
    text without a leading integer, and negative values count as 0
    (not configured).
    """
    match = _LEADING_INT.match(str(text))
    if match is None:
        return 0
    value = int(match.group(1))
    return max(value, 0)


def required_cell_count(series: int, parallel: int) -> int:
    """Cells needed for an S×P pack."""
    return series * parallel


def check_cell_count(provided: int, series: int, parallel: int) -> CellCountStatus:
    """
    Compare the number of measured cells with S × P.

    Parameters:
    ----------
    provided : int
        Number of parsed capacities

    series : int
        Series group count (S)

    parallel : int
        Cells per group (P)

    Returns:
    -------
    CellCountStatus
        READY only when the counts match exactly
    """
    if series < MIN_SERIES or parallel < MIN_PARALLEL:
        return CellCountStatus.UNCONFIGURED

    required = required_cell_count(series, parallel)
    if provided < required:
        return CellCountStatus.SHORT
    if provided > required:
        return CellCountStatus.OVER
    return CellCountStatus.READY
