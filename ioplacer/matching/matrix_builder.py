"""Cost matrix construction for one section.

Rows are slots (or fixed-size slot blocks for pin groups) in slot order;
columns are pins (or pin groups) in input order:

    cells[row][col] = cost of putting column `col` at row `row`'s slot

Each matrix remembers which slot every row starts at, so reading the
solved assignment back never has to re-derive the row/slot correlation.
"""

import logging
from dataclasses import dataclass, field
from typing import Collection, List

from ..core.abstraction import PinTable, Section, SlotArena
from .cost import INFEASIBLE, ZERO, Cost, CostOracle

logger = logging.getLogger(__name__)


@dataclass
class CostMatrix:
    """Dense cost matrix plus the row/column bookkeeping around it."""
    cells: List[List[Cost]] = field(default_factory=list)
    row_slots: List[int] = field(default_factory=list)  # first slot index of each row
    columns: List[int] = field(default_factory=list)    # pin index or group position
    block_size: int = 1

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.columns)

    @property
    def empty(self) -> bool:
        return self.rows == 0 or self.cols == 0

    def solver_matrix(self) -> List[List[int]]:
        """Integer view for the solver; infeasible cells become the sentinel."""
        return [[cell.to_solver() for cell in row] for row in self.cells]

    def cell(self, row: int, col: int) -> Cost:
        return self.cells[row][col]


@dataclass(frozen=True)
class GroupLayout:
    """Block geometry shared by every group in a section.

    All groups compete for blocks of the same size: the largest member
    count among the section's groups.
    """
    group_size: int

    @classmethod
    def for_section(cls, section: Section) -> "GroupLayout":
        return cls(max((len(g) for g in section.pin_groups), default=0))

    def candidate_starts(self, section: Section, arena: SlotArena) -> List[int]:
        """Start indices of blocks with every slot still available.

        Blocks start at begin_slot + k * group_size and must end inside the
        section; a block with any unavailable slot is skipped whole.
        """
        if self.group_size <= 0:
            return []
        starts = []
        last_start = section.end_slot - self.group_size + 1
        for start in range(section.begin_slot, last_start + 1, self.group_size):
            if all(arena[start + k].available for k in range(self.group_size)):
                starts.append(start)
        return starts


def build_pin_matrix(
    section: Section,
    arena: SlotArena,
    pins: PinTable,
    oracle: CostOracle,
    skip_placed: bool = False,
    skip_mirrored: bool = False,
    reserved: Collection[int] = (),
) -> CostMatrix:
    """
    Build the slot x pin matrix for a section's ungrouped pins.

    Args:
        section: Section being optimized
        arena: Slot storage
        pins: Pin storage
        oracle: Cost model
        skip_placed: Leave already placed pins out of the columns
        skip_mirrored: Leave pins with a mirror partner out of the columns
        reserved: Slot indices held back for pin groups

    Returns:
        CostMatrix (empty when the section has no free slots or no pins)
    """
    columns = [
        idx for idx in section.pin_indices
        if not pins[idx].in_group
        and not (skip_placed and pins[idx].placed)
        and not (skip_mirrored and pins[idx].name in pins.mirrored)
    ]
    row_slots = [
        i for i in arena.unblocked_indices(section.begin_slot, section.end_slot)
        if i not in reserved
    ]
    if not row_slots or not columns:
        return CostMatrix(columns=columns)

    cells = []
    for slot_idx in row_slots:
        pos = arena[slot_idx].pos
        cells.append([Cost.coerce(oracle.cost(pin_idx, pos)) for pin_idx in columns])

    logger.debug(
        f"Pin matrix for {section}: {len(row_slots)} x {len(columns)}"
    )
    return CostMatrix(cells=cells, row_slots=row_slots, columns=columns)


def group_cost(group_pins, oracle: CostOracle, position) -> Cost:
    """Sum of member costs at one anchor position.

    Any infeasible member makes the whole group infeasible there.
    """
    total = ZERO
    for pin_idx in group_pins:
        member = Cost.coerce(oracle.cost(pin_idx, position))
        if not member.feasible:
            return INFEASIBLE
        total = total + member
    return total


def build_group_matrix(
    section: Section,
    arena: SlotArena,
    oracle: CostOracle,
    layout: GroupLayout,
) -> CostMatrix:
    """
    Build the block x group matrix for a section's pin groups.

    Every member of a group is costed at the block's anchor (first slot)
    position.
    """
    columns = list(range(len(section.pin_groups)))
    row_slots = layout.candidate_starts(section, arena)
    if not row_slots or not columns:
        return CostMatrix(columns=columns, block_size=layout.group_size)

    cells = []
    for start in row_slots:
        anchor = arena[start].pos
        cells.append([
            group_cost(group.pin_indices, oracle, anchor)
            for group in section.pin_groups
        ])

    logger.debug(
        f"Group matrix for {section}: {len(row_slots)} blocks of "
        f"{layout.group_size} x {len(columns)} groups"
    )
    return CostMatrix(
        cells=cells,
        row_slots=row_slots,
        columns=columns,
        block_size=layout.group_size,
    )
