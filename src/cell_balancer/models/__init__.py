"""
Cell Balancer Models
====================

Immutable data models for balanced pack layouts.
"""

from .group import SeriesGroup
from .result import PartitionResult

__all__ = [
    "SeriesGroup",
    "PartitionResult",
]
