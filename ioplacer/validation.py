"""
Placement Validation

Checks a finished I/O placement against the slot grid: every placed pin on
its own real slot, mirror pairs reflected onto each other, and pin groups
laid out on consecutive slots.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple

from .core.abstraction import PinTable, Point, SlotArena


@dataclass
class PlacementIssue:
    """An issue found during placement validation."""
    severity: str  # "error", "warning"
    category: str  # "slot", "mirror", "group", "coverage"
    message: str
    location: str  # Pin or group name


class PlacementValidator:
    """Validates pin placement after (or independently of) a placer run."""

    def __init__(
        self,
        arena: SlotArena,
        pins: PinTable,
        reflect: Optional[Callable[[Point], Point]] = None,
        blocked_before: Optional[Set[int]] = None,
    ):
        """
        Args:
            arena: Slot storage
            pins: Pin storage
            reflect: Mirror transform; mirror checks are skipped without it
            blocked_before: Slots blocked before placement started
        """
        self.arena = arena
        self.pins = pins
        self.reflect = reflect
        self.blocked_before = blocked_before or set()
        self.issues: List[PlacementIssue] = []
        self._pin_slots: Dict[int, int] = {}

    def validate(self) -> Tuple[bool, List[PlacementIssue]]:
        """
        Run all placement checks.

        Returns:
            (ok, issues) - ok is False if any error was found
        """
        self.issues = []
        self._pin_slots = {}

        self._check_slots()
        self._check_mirrors()
        self._check_groups()
        self._check_coverage()

        has_errors = any(i.severity == "error" for i in self.issues)
        return (not has_errors, self.issues)

    def _error(self, category: str, message: str, location: str) -> None:
        self.issues.append(PlacementIssue("error", category, message, location))

    def _warn(self, category: str, message: str, location: str) -> None:
        self.issues.append(PlacementIssue("warning", category, message, location))

    def _check_slots(self):
        """Each placed pin sits on a distinct, used, originally free slot."""
        owners: Dict[int, str] = {}
        for idx, pin in enumerate(self.pins):
            if not pin.placed:
                continue
            slot_idx = self.arena.find_slot(pin.pos, pin.layer)
            if slot_idx is None:
                self._error("slot", f"Pin {pin.name} at {pin.pos} layer {pin.layer} "
                                    f"is not on a slot", pin.name)
                continue
            self._pin_slots[idx] = slot_idx

            if slot_idx in owners:
                self._error("slot", f"Pins {owners[slot_idx]} and {pin.name} share "
                                    f"slot {slot_idx}", pin.name)
            owners[slot_idx] = pin.name

            if not self.arena[slot_idx].used:
                self._error("slot", f"Slot {slot_idx} holds pin {pin.name} but is "
                                    f"not marked used", pin.name)
            if slot_idx in self.blocked_before:
                self._error("slot", f"Pin {pin.name} was placed on blocked slot "
                                    f"{slot_idx}", pin.name)

    def _check_mirrors(self):
        """Mirror partners are reflections of each other on the same layer."""
        if self.reflect is None:
            return
        seen = set()
        for name, partner_name in self.pins.mirrored.items():
            pair = frozenset((name, partner_name))
            if pair in seen:
                continue
            seen.add(pair)

            pin = self.pins[self.pins.index_of(name)]
            partner = self.pins[self.pins.index_of(partner_name)]
            if pin.placed != partner.placed:
                lone = pin if pin.placed else partner
                self._error("mirror", f"Pin {lone.name} is placed but its mirror "
                                      f"partner is not", lone.name)
                continue
            if not pin.placed:
                continue
            if partner.pos != self.reflect(pin.pos) or partner.layer != pin.layer:
                self._error("mirror", f"Pin {partner.name} at {partner.pos} is not the "
                                      f"mirror of {pin.name} at {pin.pos}", partner.name)

    def _check_groups(self):
        """Grouped pins fill consecutive slots, in order or exactly reversed."""
        for group in self.pins.groups:
            slots = [self._pin_slots.get(i) for i in group.pin_indices]
            if any(s is None for s in slots):
                self._warn("group", f"Pin group {group.name} is not fully placed", group.name)
                continue
            ascending = list(range(slots[0], slots[0] + len(slots)))
            descending = list(range(slots[0], slots[0] - len(slots), -1))
            if slots != ascending and slots != descending:
                self._error("group", f"Pin group {group.name} is not on consecutive "
                                     f"slots: {slots}", group.name)

    def _check_coverage(self):
        for pin in self.pins:
            if not pin.placed:
                self._warn("coverage", f"Pin {pin.name} is not placed", pin.name)
