"""
Shared test fixtures for ioplacer tests.

Provides slot rows, pin tables, table-driven cost oracles and a small
square core with slots on all four edges.
"""

import pytest
from typing import Dict, List, Sequence

from ioplacer.core.abstraction import (
    Edge,
    IOPin,
    PinTable,
    Point,
    Section,
    Slot,
    SlotArena,
)
from ioplacer.core.boundary import Core
from ioplacer.matching.cost import INFEASIBLE, CostOracle


class TableOracle(CostOracle):
    """Cost looked up by slot position: table[position][pin_index]."""

    def __init__(self, table: Dict[Point, Sequence]):
        self.table = table
        self.calls = 0

    def cost(self, pin_index: int, position: Point):
        self.calls += 1
        return self.table[position][pin_index]


@pytest.fixture
def make_row():
    """Factory for a single-edge row of slots at the given x coordinates."""
    def _make(xs: List[int], edge: Edge = Edge.BOTTOM, y: int = 0,
              layer: int = 1, blocked: Sequence[int] = ()) -> SlotArena:
        return SlotArena([
            Slot(pos=Point(x, y), layer=layer, edge=edge, blocked=i in blocked)
            for i, x in enumerate(xs)
        ])
    return _make


@pytest.fixture
def make_pins():
    """Factory for a pin table with the given names."""
    def _make(*names: str) -> PinTable:
        return PinTable([IOPin(name=n) for n in names])
    return _make


@pytest.fixture
def make_section():
    """Factory for a section spanning a whole arena."""
    def _make(arena: SlotArena, pins: List[int], edge: Edge = Edge.BOTTOM,
              groups=None) -> Section:
        section = Section.over(arena, 0, len(arena) - 1, edge)
        section.pin_indices = list(pins)
        section.pin_groups = list(groups or [])
        return section
    return _make


@pytest.fixture
def scenario_oracle() -> TableOracle:
    """Three slots at x=0,10,20 and two pins.

    rows = slots, cols = pins:
        [[5, INFEASIBLE],
         [1, 9],
         [INFEASIBLE, 2]]
    """
    return TableOracle({
        Point(0, 0): [5, INFEASIBLE],
        Point(10, 0): [1, 9],
        Point(20, 0): [INFEASIBLE, 2],
    })


@pytest.fixture
def square_core() -> Core:
    return Core(0, 0, 100, 100)


@pytest.fixture
def ring_arena(square_core) -> SlotArena:
    """Slots every 20 units on each edge, counter-clockwise from bottom-left.

    Corners are left out so each position belongs to exactly one edge.
    """
    slots = []
    for x in (20, 40, 60, 80):
        slots.append(Slot(pos=Point(x, 0), layer=1, edge=Edge.BOTTOM))
    for y in (20, 40, 60, 80):
        slots.append(Slot(pos=Point(100, y), layer=2, edge=Edge.RIGHT))
    for x in (80, 60, 40, 20):
        slots.append(Slot(pos=Point(x, 100), layer=1, edge=Edge.TOP))
    for y in (80, 60, 40, 20):
        slots.append(Slot(pos=Point(0, y), layer=2, edge=Edge.LEFT))
    return SlotArena(slots)


@pytest.fixture
def problem_yaml() -> str:
    """A small problem file: 4 bottom + 4 top slots, a mirror pair and a bus."""
    return """
version: 1
core: {xmin: 0, ymin: 0, xmax: 100, ymax: 100}
slots:
  - {x: 20, y: 0, layer: 1}
  - {x: 40, y: 0, layer: 1}
  - {x: 60, y: 0, layer: 1}
  - {x: 80, y: 0, layer: 1, blocked: true}
  - {x: 80, y: 100, layer: 1}
  - {x: 60, y: 100, layer: 1}
  - {x: 40, y: 100, layer: 1}
  - {x: 20, y: 100, layer: 1}
pins:
  - name: clk
    target: [20, 10]
  - name: tx
    target: [60, 10]
    mirror: rx
  - name: rx
  - name: d0
    target: [80, 90]
  - name: d1
    target: [80, 90]
groups:
  - name: data
    pins: [d0, d1]
    order: true
"""
