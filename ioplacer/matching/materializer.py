"""Turn a solved assignment back into pin placements.

The solver hands back ``assignment[row] = column``. The materializer walks
the columns (pins or groups) in the order the matrix was built, finds the
row each one was matched to, and commits the placement onto the slot that
row stands for.

Placement is two-phase: every placement of a pass is staged and checked
(mirror partners included) before anything is written, so a broken mirror
constraint never leaves half a pair behind.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..core.abstraction import Edge, PinTable, Point, Section, SlotArena
from ..errors import MirrorPositionError
from .hungarian import UNASSIGNED
from .matrix_builder import CostMatrix, GroupLayout

logger = logging.getLogger(__name__)


@dataclass
class Diagnostic:
    """A warning or error raised while materializing."""
    severity: str  # "warning", "error"
    message: str
    pin: str = ""


@dataclass
class MaterializeResult:
    """What one materialization pass committed."""
    placed: List[int] = field(default_factory=list)  # pin indices, commit order
    diagnostics: List[Diagnostic] = field(default_factory=list)
    failures: List[Tuple[str, str, str]] = field(default_factory=list)  # (pin, partner, reason)
    cost: int = 0  # summed feasible cost of committed rows

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]


@dataclass
class _Staged:
    pin_idx: int
    slot_idx: int
    partner_idx: Optional[int] = None
    partner_slot: Optional[int] = None


def _column_rows(assignment: List[int]) -> Dict[int, int]:
    """Invert row -> column into column -> row."""
    return {col: row for row, col in enumerate(assignment) if col != UNASSIGNED}


def _insufficient_space(name: str) -> str:
    return f"I/O pin {name} cannot be placed in the specified region. Not enough space."


class AssignmentMaterializer:
    """Commits solved assignments for one section onto slots and pins.

    The only code path that mutates pin placement and slot flags.
    """

    def __init__(
        self,
        arena: SlotArena,
        pins: PinTable,
        reflect: Optional[Callable[[Point], Point]] = None,
    ):
        """
        Initialize materializer.

        Args:
            arena: Slot storage
            pins: Pin storage, including mirror pairs
            reflect: Mirror transform, required for mirrored placement
        """
        self.arena = arena
        self.pins = pins
        self.reflect = reflect

    def materialize_pins(
        self,
        matrix: CostMatrix,
        assignment: List[int],
        assign_mirrored: bool = False,
        strict: bool = True,
    ) -> MaterializeResult:
        """
        Commit an ungrouped-pin assignment.

        Args:
            matrix: Matrix the assignment was solved from
            assignment: Solver output, one column per row
            assign_mirrored: Mirror phase; only pins with a mirror partner are
                placed, and their partners are placed at the reflected slot
            strict: Raise MirrorPositionError after committing if any mirror
                partner could not be placed

        Returns:
            MaterializeResult for this pass
        """
        result = MaterializeResult()
        if matrix.empty:
            return result

        col_rows = _column_rows(assignment)
        staged: List[_Staged] = []
        staged_pins: Set[int] = set()
        claimed: Set[int] = set()

        for col, pin_idx in enumerate(matrix.columns):
            pin = self.pins[pin_idx]
            row = col_rows.get(col)
            if row is None:
                # More pins than slots; stays unassigned for a later pass
                logger.debug(f"Pin {pin.name} received no slot")
                continue

            partner_idx = self.pins.mirror_partner(pin_idx)
            if pin.placed or pin_idx in staged_pins:
                continue
            if assign_mirrored and partner_idx is None:
                continue

            slot_idx = matrix.row_slots[row]
            if slot_idx in claimed or not self.arena[slot_idx].available:
                logger.debug(f"Slot {slot_idx} for pin {pin.name} was taken by a mirror partner")
                continue

            entry = _Staged(pin_idx=pin_idx, slot_idx=slot_idx)
            if assign_mirrored:
                failure = self._stage_partner(entry, partner_idx, staged_pins, claimed)
                if failure:
                    partner_name = self.pins[partner_idx].name
                    result.failures.append((pin.name, partner_name, failure))
                    continue

            cell = matrix.cell(row, col)
            if not cell.feasible:
                message = _insufficient_space(pin.name)
                logger.warning(message)
                result.diagnostics.append(Diagnostic("warning", message, pin.name))

            staged.append(entry)
            staged_pins.add(pin_idx)
            claimed.add(slot_idx)
            if entry.partner_idx is not None:
                staged_pins.add(entry.partner_idx)
                claimed.add(entry.partner_slot)
            if cell.feasible:
                result.cost += cell.value

        for entry in staged:
            self._commit(entry.pin_idx, entry.slot_idx, result)
            if entry.partner_idx is not None:
                self._commit(entry.partner_idx, entry.partner_slot, result)

        for pin_name, partner_name, reason in result.failures:
            message = f"Mirrored pin {partner_name} of {pin_name} cannot be placed: {reason}"
            logger.error(message)
            result.diagnostics.append(Diagnostic("error", message, pin_name))

        if result.failures and strict:
            raise MirrorPositionError(result.failures)
        return result

    def _stage_partner(
        self,
        entry: _Staged,
        partner_idx: int,
        staged_pins: Set[int],
        claimed: Set[int],
    ) -> Optional[str]:
        """Resolve the partner slot for a staged pin. Returns a failure reason or None."""
        if self.reflect is None:
            raise ValueError("Mirrored placement requires a reflect transform")

        partner = self.pins[partner_idx]
        if partner.placed or partner_idx in staged_pins:
            return "partner already placed"

        slot = self.arena[entry.slot_idx]
        mirrored_pos = self.reflect(slot.pos)
        partner_slot = self.arena.find_slot(mirrored_pos, slot.layer)
        if partner_slot is None:
            return (f"mirrored position ({mirrored_pos.x}, {mirrored_pos.y}) at layer "
                    f"{slot.layer} is not a valid position for pin placement")
        if (partner_slot == entry.slot_idx or partner_slot in claimed
                or not self.arena[partner_slot].available):
            return f"mirrored slot {partner_slot} is already occupied"

        entry.partner_idx = partner_idx
        entry.partner_slot = partner_slot
        return None

    def _commit(self, pin_idx: int, slot_idx: int, result: MaterializeResult) -> None:
        slot = self.arena[slot_idx]
        self.pins[pin_idx].place(slot.pos, slot.layer)
        self.arena.mark_used(slot_idx)
        result.placed.append(pin_idx)

    def materialize_groups(
        self,
        matrix: CostMatrix,
        assignment: List[int],
        section: Section,
        layout: GroupLayout,
    ) -> MaterializeResult:
        """
        Commit a pin-group assignment.

        Members fill consecutive slots from the block start. On top and left
        edges an ordered group is laid out back to front. Every slot a group
        takes becomes used and blocked.
        """
        result = MaterializeResult()
        if matrix.empty:
            return result

        col_rows = _column_rows(assignment)
        for col, group in enumerate(section.pin_groups):
            row = col_rows.get(col)
            if row is None:
                message = f"I/O pin group {group.name} received no slot block"
                logger.warning(message)
                result.diagnostics.append(Diagnostic("warning", message, group.name))
                continue

            start = matrix.row_slots[row]
            cell = matrix.cell(row, col)
            if cell.feasible:
                result.cost += cell.value
            else:
                message = _insufficient_space(group.name)
                logger.warning(message)
                result.diagnostics.append(Diagnostic("warning", message, group.name))

            reverse = group.order and section.edge in (Edge.TOP, Edge.LEFT)
            size = len(group)
            for k, pin_idx in enumerate(group.pin_indices):
                offset = size - 1 - k if reverse else k
                slot_idx = start + offset
                self._commit(pin_idx, slot_idx, result)
                self.arena.mark_blocked(slot_idx)
                if slot_idx <= section.end_slot:
                    section.num_slots -= 1

        logger.debug(
            f"Placed {len(result.placed)} grouped pins in blocks of {layout.group_size}"
        )
        return result
