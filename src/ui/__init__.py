"""
Cell Balancer UI Module
=======================

User interface components for the Cell Balancer.

- CellBalancerUI: Graphical interface for balancing cells into series groups

Usage:
------
    from src.ui import CellBalancerUI

    CellBalancerUI().run()
"""

from .cell_balancer_ui import CellBalancerUI

__all__ = [
    "CellBalancerUI",
]
