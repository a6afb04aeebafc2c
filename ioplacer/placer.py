"""Main IOPlacer orchestrator.

Coordinates slot assignment over the whole boundary:
1. Partitions each edge's slots into sections
2. Distributes pins and pin groups to the cheapest section with room
3. Runs the mirrored-pin pass over every section
4. Reserves the slot blocks each section's pin groups will take
5. Runs the regular pin pass over every section, outside reserved blocks
6. Runs the pin-group pass over every section

Mirrored partners usually land on the opposite edge, i.e. in another
section, so every section finishes its mirror pass before any section
starts placing regular pins.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .config import PlacerConfig
from .errors import MirrorPositionError
from .core.abstraction import PinTable, Point, Section, SlotArena
from .matching.cost import Cost, CostOracle
from .matching.matcher import HungarianMatching
from .matching.materializer import Diagnostic, MaterializeResult
from .matching.matrix_builder import group_cost

logger = logging.getLogger(__name__)


@dataclass
class PlacementResult:
    """Result of a full I/O placement run."""
    success: bool
    sections: int = 0
    placed: int = 0
    total_cost: int = 0

    warnings: List[Diagnostic] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)
    unplaced: List[str] = field(default_factory=list)

    def absorb(self, result: MaterializeResult) -> None:
        self.placed += len(result.placed)
        self.total_cost += result.cost
        self.warnings.extend(result.warnings)
        self.errors.extend(result.errors)

    def summary(self) -> str:
        lines = [
            f"Sections:   {self.sections}",
            f"Placed:     {self.placed}",
            f"Total cost: {self.total_cost}",
        ]
        if self.warnings:
            lines.append(f"Warnings:   {len(self.warnings)}")
        if self.errors:
            lines.append(f"Errors:     {len(self.errors)}")
        if self.unplaced:
            lines.append(f"Unplaced:   {', '.join(self.unplaced)}")
        return "\n".join(lines)


def define_sections(arena: SlotArena, slots_per_section: int) -> List[Section]:
    """
    Partition the boundary into sections.

    Each maximal run of same-edge slots is cut into consecutive sections of
    at most ``slots_per_section`` slots. Sections with no free slot are dropped.
    """
    sections = []
    for edge, first, last in arena.edge_runs():
        for begin in range(first, last + 1, slots_per_section):
            end = min(begin + slots_per_section - 1, last)
            section = Section.over(arena, begin, end, edge)
            if section.num_slots > 0:
                sections.append(section)
    return sections


def _rank(cost: Cost) -> tuple:
    # Feasible sections first, then cheapest
    return (not cost.feasible, cost.value if cost.feasible else 0)


class IOPlacer:
    """Assigns every I/O pin and pin group to a boundary slot.

    Usage:
        placer = IOPlacer(arena, pins, oracle, reflect=core.mirrored_position)
        result = placer.run()
        print(result.summary())
    """

    def __init__(
        self,
        arena: SlotArena,
        pins: PinTable,
        oracle: CostOracle,
        reflect: Optional[Callable[[Point], Point]] = None,
        config: Optional[PlacerConfig] = None,
    ):
        """
        Initialize placer.

        Args:
            arena: Slot storage (mutated: used/blocked flags)
            pins: Pin storage (mutated: positions and placed flags)
            oracle: Cost model
            reflect: Mirror transform, needed when pins.mirrored is non-empty
            config: Optional configuration
        """
        self.arena = arena
        self.pins = pins
        self.oracle = oracle
        self.reflect = reflect
        self.config = (config or PlacerConfig()).validate()

        if pins.mirrored and reflect is None:
            raise ValueError("Mirrored pins require a reflect transform")

        self.sections: List[Section] = []

    def run(self) -> PlacementResult:
        """
        Place all pins.

        Returns:
            PlacementResult with counts, diagnostics and unplaced pins

        Raises:
            MirrorPositionError: If strict mirroring is on and a reflected
                position has no slot. Raised after every pass has run, so all
                other placements stay committed; the partial result is
                attached as ``error.result``
        """
        self.sections = define_sections(self.arena, self.config.slots_per_section)
        result = PlacementResult(success=True, sections=len(self.sections))
        if not self.sections:
            result.unplaced = [p.name for p in self.pins if not p.placed]
            result.success = not result.unplaced
            logger.warning("No free slots on the boundary")
            return result

        self.assign_pins_to_sections(self.sections)
        matchings = [
            HungarianMatching(
                section,
                self.arena,
                self.pins,
                self.oracle,
                reflect=self.reflect,
                strict_mirroring=False,
            )
            for section in self.sections
        ]

        mirror_failures = []
        if self.pins.mirrored:
            for matching in matchings:
                matching.find_assignment(assign_mirrored=True)
                mirrored = matching.get_final_assignment(assign_mirrored=True)
                mirror_failures.extend(mirrored.failures)
                result.absorb(mirrored)

        if self.config.assign_groups:
            for matching in matchings:
                if matching.section.pin_groups:
                    matching.reserve_group_blocks()

        for matching in matchings:
            matching.find_assignment()
            result.absorb(matching.get_final_assignment())

        if self.config.assign_groups:
            for matching in matchings:
                if not matching.section.pin_groups:
                    continue
                matching.find_assignment_for_groups()
                result.absorb(matching.get_assignment_for_groups())

        result.unplaced = [p.name for p in self.pins if not p.placed]
        for name in result.unplaced:
            logger.warning(f"I/O pin {name} was not assigned to any slot")
        result.success = not result.unplaced and not result.errors

        logger.info(
            f"Placed {result.placed} pins in {result.sections} sections, "
            f"total cost {result.total_cost}"
        )
        if mirror_failures and self.config.strict_mirroring:
            raise MirrorPositionError(mirror_failures, result=result)
        return result

    def assign_pins_to_sections(self, sections: List[Section]) -> None:
        """
        Distribute unplaced pins and groups over sections.

        Each pin goes to the section whose middle free slot is cheapest for
        it, among sections with capacity left. Only the first pin of a mirror
        pair is distributed; its partner follows it through reflection.
        """
        middles = {}
        capacity: Dict[int, int] = {}
        for s_idx, section in enumerate(sections):
            free = self.arena.unblocked_indices(section.begin_slot, section.end_slot)
            middles[s_idx] = self.arena[free[len(free) // 2]].pos
            capacity[s_idx] = max(1, int(section.num_slots * self.config.slots_usage_factor))
            section.pin_indices = []
            section.pin_groups = []

        for group in self.pins.groups:
            if all(self.pins[i].placed for i in group.pin_indices):
                continue
            ranked = sorted(
                range(len(sections)),
                key=lambda s: _rank(group_cost(group.pin_indices, self.oracle, middles[s])),
            )
            for s_idx in ranked:
                if capacity[s_idx] >= len(group):
                    sections[s_idx].pin_groups.append(group)
                    capacity[s_idx] -= len(group)
                    break
            else:
                logger.warning(f"No section has room for pin group {group.name}")

        followers = set()
        for pin_idx, pin in enumerate(self.pins):
            if pin.placed or pin.in_group or pin_idx in followers:
                continue
            partner = self.pins.mirror_partner(pin_idx)
            if partner is not None:
                followers.add(partner)

            ranked = sorted(
                range(len(sections)),
                key=lambda s: _rank(Cost.coerce(self.oracle.cost(pin_idx, middles[s]))),
            )
            open_sections = [s for s in ranked if capacity[s] > 0]
            # Overfull boundary: still give the pin a section to compete in
            s_idx = open_sections[0] if open_sections else ranked[0]
            sections[s_idx].pin_indices.append(pin_idx)
            capacity[s_idx] -= 1

        for section in sections:
            logger.debug(f"{section}")
