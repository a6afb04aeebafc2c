"""
ioplacer - I/O Pin Slot Assignment

Assigns chip-boundary I/O pins and ordered pin groups to placement slots
along the four edges of the core, minimizing estimated wirelength with the
Hungarian algorithm while honoring blockages, grouping and mirror symmetry.
"""

__version__ = "0.1.0"

from .config import PlacerConfig
from .core import Core, Edge, IOPin, PinGroup, PinTable, Point, Section, Slot, SlotArena
from .errors import IOPlacerError, MirrorPositionError, ProblemFileError
from .matching import INFEASIBLE, Cost, CostOracle, HungarianMatching, HungarianSolver
from .placer import IOPlacer, PlacementResult

__all__ = [
    "PlacerConfig",
    "Core",
    "Edge",
    "IOPin",
    "PinGroup",
    "PinTable",
    "Point",
    "Section",
    "Slot",
    "SlotArena",
    "IOPlacerError",
    "MirrorPositionError",
    "ProblemFileError",
    "INFEASIBLE",
    "Cost",
    "CostOracle",
    "HungarianMatching",
    "HungarianSolver",
    "IOPlacer",
    "PlacementResult",
]
