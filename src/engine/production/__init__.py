"""Constrained production core for multi-regional IO models.

Per-period production of every sector-region bounded by material stock,
intermediate inflows, and downstream orders, plus the unconstrained
capacity ceiling and the overproduction pressure signal.

This module is DETERMINISTIC. Pure functions over dense matrices, no I/O.
"""
