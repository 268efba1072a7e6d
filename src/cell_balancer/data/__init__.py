"""
Cell Balancer Data Module
=========================

Contains demo measurement sets and lookup functions.
"""

from .demo_packs import (
    DemoPack,
    DEMO_PACKS,
    DEFAULT_DEMO,
    get_demo,
    list_demos,
)

__all__ = [
    "DemoPack",
    "DEMO_PACKS",
    "DEFAULT_DEMO",
    "get_demo",
    "list_demos",
]
