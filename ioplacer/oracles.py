"""Reference cost oracle for problem files and the CLI.

Production flows plug in their own net-length model. This one scores a
slot by Manhattan distance to a per-pin target point (typically the
centroid of the pin's net) and treats slots outside a pin's allowed
region as infeasible.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .core.abstraction import Point
from .matching.cost import INFEASIBLE, Cost, CostOracle


@dataclass(frozen=True)
class Region:
    """Axis-aligned box a pin must be placed inside (bounds inclusive)."""
    xmin: int
    ymin: int
    xmax: int
    ymax: int

    def contains(self, point: Point) -> bool:
        return self.xmin <= point.x <= self.xmax and self.ymin <= point.y <= self.ymax


@dataclass
class TargetDistanceOracle(CostOracle):
    """Manhattan distance from a slot to each pin's target point."""
    targets: Dict[int, Point] = field(default_factory=dict)
    regions: Dict[int, Region] = field(default_factory=dict)
    default_cost: int = 0  # Pins without a target are indifferent

    def cost(self, pin_index: int, position: Point) -> Cost:
        region: Optional[Region] = self.regions.get(pin_index)
        if region is not None and not region.contains(position):
            return INFEASIBLE
        target = self.targets.get(pin_index)
        if target is None:
            return Cost.finite(self.default_cost)
        return Cost.finite(target.manhattan(position))
