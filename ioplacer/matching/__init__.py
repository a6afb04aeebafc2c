"""Slot assignment by minimum-cost bipartite matching.

This module implements:
- Cost values with an explicit infeasible variant
- Cost matrix construction for ungrouped pins and fixed-size group blocks
- The Hungarian algorithm for rectangular assignment problems
- Materialization of solved assignments onto slots, including mirrored pins

Usage:
    from ioplacer.matching import HungarianMatching

    matching = HungarianMatching(section, arena, pins, oracle)
    matching.find_assignment()
    result = matching.get_final_assignment()
"""

from .cost import (
    Cost,
    CostOracle,
    CallableOracle,
    INFEASIBLE,
    HUNGARIAN_FAIL,
)
from .hungarian import (
    HungarianSolver,
    UNASSIGNED,
    total_cost,
)
from .matrix_builder import (
    CostMatrix,
    GroupLayout,
    build_pin_matrix,
    build_group_matrix,
)
from .materializer import (
    AssignmentMaterializer,
    MaterializeResult,
    Diagnostic,
)
from .matcher import HungarianMatching

__all__ = [
    # Costs
    "Cost",
    "CostOracle",
    "CallableOracle",
    "INFEASIBLE",
    "HUNGARIAN_FAIL",
    # Solver
    "HungarianSolver",
    "UNASSIGNED",
    "total_cost",
    # Matrices
    "CostMatrix",
    "GroupLayout",
    "build_pin_matrix",
    "build_group_matrix",
    # Materialization
    "AssignmentMaterializer",
    "MaterializeResult",
    "Diagnostic",
    # Per-section driver
    "HungarianMatching",
]
