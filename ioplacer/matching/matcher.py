"""Per-section Hungarian matching: build matrix, solve, materialize.

One HungarianMatching instance handles one section. Ungrouped pins and pin
groups are independent passes; each builds its own matrix, and the group
matrix and assignment are thrown away once the groups are placed.
"""

import logging
from typing import Callable, List, Optional, Set

from ..core.abstraction import PinTable, Point, Section, SlotArena
from .cost import CostOracle
from .hungarian import UNASSIGNED, HungarianSolver
from .materializer import AssignmentMaterializer, MaterializeResult
from .matrix_builder import (
    CostMatrix,
    GroupLayout,
    build_group_matrix,
    build_pin_matrix,
)

logger = logging.getLogger(__name__)


class HungarianMatching:
    """Optimal slot assignment for the pins and groups of one section.

    Usage:
        matching = HungarianMatching(section, arena, pins, oracle, core.mirrored_position)

        matching.find_assignment(assign_mirrored=True)
        matching.get_final_assignment(assign_mirrored=True)

        matching.reserve_group_blocks()
        matching.find_assignment()
        matching.get_final_assignment()

        matching.find_assignment_for_groups()
        matching.get_assignment_for_groups()
    """

    def __init__(
        self,
        section: Section,
        arena: SlotArena,
        pins: PinTable,
        oracle: CostOracle,
        reflect: Optional[Callable[[Point], Point]] = None,
        strict_mirroring: bool = True,
    ):
        self.section = section
        self.arena = arena
        self.pins = pins
        self.oracle = oracle
        self.strict_mirroring = strict_mirroring

        self._solver = HungarianSolver()
        self._materializer = AssignmentMaterializer(arena, pins, reflect)

        self.matrix = CostMatrix()
        self.assignment: List[int] = []
        self.layout = GroupLayout.for_section(section)
        self.reserved: Set[int] = set()

    def find_assignment(self, assign_mirrored: bool = False) -> None:
        """Build the slot x pin matrix over still-free slots and solve it.

        The regular pass leaves mirrored pins out; they are only placed by
        the mirror pass, together with their partner.
        """
        self.matrix = build_pin_matrix(
            self.section,
            self.arena,
            self.pins,
            self.oracle,
            skip_placed=True,
            skip_mirrored=not assign_mirrored,
            reserved=self.reserved,
        )
        self.assignment = [] if self.matrix.empty else self._solver.solve(
            self.matrix.solver_matrix()
        )

    def get_final_assignment(self, assign_mirrored: bool = False) -> MaterializeResult:
        """Commit the last solved pin assignment."""
        result = self._materializer.materialize_pins(
            self.matrix,
            self.assignment,
            assign_mirrored=assign_mirrored,
            strict=self.strict_mirroring,
        )
        logger.debug(
            f"{self.section}: placed {len(result.placed)} pins"
            f"{' (mirrored pass)' if assign_mirrored else ''}"
        )
        return result

    def reserve_group_blocks(self) -> Set[int]:
        """Hold back the blocks the pin groups would take from the pin pass.

        The group matrix is solved over the slots still free, and every slot
        of each matched block is reserved until the group pass runs.
        """
        self.reserved = set()
        matrix = build_group_matrix(self.section, self.arena, self.oracle, self.layout)
        if matrix.empty:
            return self.reserved
        for row, col in enumerate(self._solver.solve(matrix.solver_matrix())):
            if col != UNASSIGNED:
                start = matrix.row_slots[row]
                self.reserved.update(range(start, start + self.layout.group_size))
        logger.debug(f"{self.section}: reserved {len(self.reserved)} slots for pin groups")
        return self.reserved

    def find_assignment_for_groups(self) -> None:
        """Build the block x group matrix and solve it."""
        self.matrix = build_group_matrix(self.section, self.arena, self.oracle, self.layout)
        self.assignment = [] if self.matrix.empty else self._solver.solve(
            self.matrix.solver_matrix()
        )

    def get_assignment_for_groups(self) -> MaterializeResult:
        """Commit the group assignment, then discard matrix and assignment."""
        result = self._materializer.materialize_groups(
            self.matrix, self.assignment, self.section, self.layout
        )
        if self.matrix.empty and self.section.pin_groups:
            logger.warning(
                f"{self.section}: no free block of {self.layout.group_size} slots "
                f"for {len(self.section.pin_groups)} pin group(s)"
            )
        self.matrix = CostMatrix()
        self.assignment = []
        self.reserved = set()
        return result
