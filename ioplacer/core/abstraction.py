"""
Boundary Slot Model

The addressable units of I/O placement: slots along the four edges of the
core, the sections they are grouped into for optimization, and the pins
and pin groups being assigned to them.

Slot and pin storage is owned by the caller. The matching code only reads
positions/layers and flips the commit-once ``used``/``blocked``/``placed``
flags through the methods defined here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional


class Edge(Enum):
    """Side of the core a slot lies on."""
    BOTTOM = "bottom"
    RIGHT = "right"
    TOP = "top"
    LEFT = "left"
    INVALID = "invalid"

    @classmethod
    def parse(cls, value: str) -> "Edge":
        """Parse an edge name (case-insensitive)."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(e.value for e in cls if e is not cls.INVALID)
            raise ValueError(f"Unknown edge '{value}'. Expected one of: {names}")


@dataclass(frozen=True)
class Point:
    """Integer coordinate in database units."""
    x: int
    y: int

    def manhattan(self, other: "Point") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass
class Slot:
    """A candidate boundary position/layer for one I/O pin."""
    pos: Point
    layer: int
    edge: Edge = Edge.INVALID
    blocked: bool = False  # Permanently unusable (macro, group reservation)
    used: bool = False     # Already carries a placed pin

    @property
    def available(self) -> bool:
        return not self.blocked and not self.used


class SlotArena:
    """Ordered slot storage indexed by position along the boundary.

    All mutation goes through :meth:`mark_used` and :meth:`mark_blocked`,
    and both are commit-once: a flag that has been set is never cleared.
    """

    def __init__(self, slots: Optional[List[Slot]] = None):
        self.slots: List[Slot] = list(slots or [])

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> Slot:
        return self.slots[index]

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    def unblocked_indices(self, begin: int, end: int) -> List[int]:
        """Available slot indices in ``[begin, end]``, in slot order."""
        end = min(end, len(self.slots) - 1)
        return [i for i in range(begin, end + 1) if self.slots[i].available]

    def count_unblocked(self, begin: int, end: int) -> int:
        return len(self.unblocked_indices(begin, end))

    def find_slot(self, position: Point, layer: int) -> Optional[int]:
        """Index of the slot at exactly ``position`` on ``layer``.

        Linear scan; only mirrored-pin placement needs this lookup.
        """
        for i, slot in enumerate(self.slots):
            if slot.pos == position and slot.layer == layer:
                return i
        return None

    def mark_used(self, index: int) -> None:
        self.slots[index].used = True

    def mark_blocked(self, index: int) -> None:
        self.slots[index].blocked = True

    def edge_runs(self) -> List[tuple]:
        """Split the arena into maximal runs of consecutive same-edge slots.

        Returns:
            List of (edge, first_index, last_index) tuples
        """
        runs = []
        start = 0
        for i in range(1, len(self.slots) + 1):
            if i == len(self.slots) or self.slots[i].edge != self.slots[start].edge:
                runs.append((self.slots[start].edge, start, i - 1))
                start = i
        return runs


@dataclass(frozen=True)
class PinGroup:
    """Pins that must occupy consecutive slots in the given order.

    ``order`` reverses placement direction on top and left edges so that
    bus bit order reads consistently around the die.
    """
    pin_indices: tuple
    order: bool = False
    name: str = ""

    def __len__(self) -> int:
        return len(self.pin_indices)


@dataclass
class IOPin:
    """A chip-boundary I/O pin."""
    name: str
    pos: Optional[Point] = None
    layer: int = -1
    placed: bool = False
    in_group: bool = False

    def place(self, pos: Point, layer: int) -> None:
        self.pos = pos
        self.layer = layer
        self.placed = True


class PinTable:
    """Pin storage plus the grouping and mirroring metadata around it."""

    def __init__(self, pins: Optional[List[IOPin]] = None):
        self.pins: List[IOPin] = []
        self.groups: List[PinGroup] = []
        # pin name -> partner name, stored in both directions
        self.mirrored: Dict[str, str] = {}
        self._index: Dict[str, int] = {}
        for pin in pins or []:
            self.add_pin(pin)

    def __len__(self) -> int:
        return len(self.pins)

    def __getitem__(self, index: int) -> IOPin:
        return self.pins[index]

    def __iter__(self) -> Iterator[IOPin]:
        return iter(self.pins)

    def add_pin(self, pin: IOPin) -> int:
        if pin.name in self._index:
            raise ValueError(f"Duplicate pin name '{pin.name}'")
        self.pins.append(pin)
        self._index[pin.name] = len(self.pins) - 1
        return self._index[pin.name]

    def index_of(self, name: str) -> int:
        if name not in self._index:
            raise KeyError(f"Unknown pin '{name}'")
        return self._index[name]

    def add_group(self, names: List[str], order: bool = False, name: str = "") -> PinGroup:
        """Register an ordered pin group by member names."""
        indices = tuple(self.index_of(n) for n in names)
        for idx in indices:
            if self.pins[idx].in_group:
                raise ValueError(f"Pin '{self.pins[idx].name}' is already in a group")
            self.pins[idx].in_group = True
        group = PinGroup(pin_indices=indices, order=order, name=name or f"group{len(self.groups)}")
        self.groups.append(group)
        return group

    def add_mirror(self, name: str, partner: str) -> None:
        """Declare two pins as mirror images of each other."""
        self.index_of(name)
        self.index_of(partner)
        if name == partner:
            raise ValueError(f"Pin '{name}' cannot mirror itself")
        self.mirrored[name] = partner
        self.mirrored[partner] = name

    def mirror_partner(self, index: int) -> Optional[int]:
        partner = self.mirrored.get(self.pins[index].name)
        return self.index_of(partner) if partner is not None else None


@dataclass
class Section:
    """A contiguous run of slots on one edge, optimized together.

    ``end_slot`` is inclusive. ``num_slots`` counts the available slots in
    range and is decremented as group placement blocks slots.
    """
    begin_slot: int
    end_slot: int
    edge: Edge
    num_slots: int = 0
    pin_indices: List[int] = field(default_factory=list)
    pin_groups: List[PinGroup] = field(default_factory=list)

    @classmethod
    def over(cls, arena: SlotArena, begin: int, end: int, edge: Edge) -> "Section":
        return cls(begin_slot=begin, end_slot=end, edge=edge,
                   num_slots=arena.count_unblocked(begin, end))

    def __repr__(self) -> str:
        return (f"Section({self.edge.value}, [{self.begin_slot}, {self.end_slot}], "
                f"{self.num_slots} free, {len(self.pin_indices)} pins, "
                f"{len(self.pin_groups)} groups)")
