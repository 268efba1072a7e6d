"""
Cell Balancer - Main Package
============================

Tools for building battery packs from measured cells.

This package provides modules for:
- Cell Balancer (cell_balancer): balance measured cells into series groups
- User Interface (ui): desktop front end for the balancer

Author: Cell Balancer Team
"""

__version__ = "0.1.0"
__author__ = "Cell Balancer Team"
