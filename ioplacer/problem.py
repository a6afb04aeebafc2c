"""
I/O Placement Problem Files

Reads a placement problem (core, slots, pins, groups, mirror pairs) from
YAML and writes the resulting pin positions back out.

Problem Format (YAML):
```yaml
version: 1
core: {xmin: 0, ymin: 0, xmax: 1000, ymax: 1000}
slots:                       # in boundary order
  - {x: 100, y: 0, layer: 3}
  - {x: 200, y: 0, layer: 3, blocked: true}
pins:
  - name: clk
    target: [150, 400]       # optional, cost = distance to target
    region: [0, 0, 500, 0]   # optional, xmin ymin xmax ymax
  - name: tx
    mirror: rx               # rx must be placed at the reflected slot
  - name: rx
groups:
  - name: data
    pins: [d0, d1, d2]
    order: true
```

Result Format (YAML):
```yaml
version: 1
pins:
  clk: {x: 100, y: 0, layer: 3}
unplaced: []
warnings: ["I/O pin ... Not enough space."]
```

Slot edges are taken from an explicit ``edge`` key or derived from the core.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .core.abstraction import Edge, IOPin, PinTable, Point, Slot, SlotArena
from .core.boundary import Core
from .errors import ProblemFileError
from .oracles import Region, TargetDistanceOracle
from .placer import PlacementResult

logger = logging.getLogger(__name__)

# Problem file version for format compatibility
PROBLEM_FILE_VERSION = 1


@dataclass
class Problem:
    """A loaded placement problem."""
    core: Core
    arena: SlotArena
    pins: PinTable
    oracle: TargetDistanceOracle
    source_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Problem":
        """Build a problem from parsed YAML."""
        if not isinstance(data, dict):
            raise ProblemFileError("Problem file must contain a mapping")
        try:
            version = int(data.get("version", PROBLEM_FILE_VERSION))
            if version > PROBLEM_FILE_VERSION:
                raise ProblemFileError(
                    f"Problem file version {version} is newer than supported "
                    f"({PROBLEM_FILE_VERSION})"
                )

            core = Core(**_require(data, "core"))
            arena = SlotArena([_parse_slot(core, s) for s in _require(data, "slots")])
            pins = PinTable()
            oracle = TargetDistanceOracle()
            mirrors: List[Tuple[str, str]] = []

            for entry in _require(data, "pins"):
                idx = pins.add_pin(IOPin(name=str(entry["name"])))
                if "target" in entry:
                    x, y = entry["target"]
                    oracle.targets[idx] = Point(int(x), int(y))
                if "region" in entry:
                    oracle.regions[idx] = Region(*(int(v) for v in entry["region"]))
                if entry.get("mirror"):
                    mirrors.append((str(entry["name"]), str(entry["mirror"])))

            for name, partner in mirrors:
                pins.add_mirror(name, partner)

            for entry in data.get("groups") or []:
                pins.add_group(
                    [str(n) for n in entry["pins"]],
                    order=bool(entry.get("order", False)),
                    name=str(entry.get("name", "")),
                )
        except ProblemFileError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise ProblemFileError(f"Invalid problem definition: {e}") from e

        return cls(core=core, arena=arena, pins=pins, oracle=oracle)


def _require(data: Dict[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise ProblemFileError(f"Problem file is missing '{key}'")
    return data[key]


def _parse_slot(core: Core, entry: Dict[str, Any]) -> Slot:
    pos = Point(int(entry["x"]), int(entry["y"]))
    edge = Edge.parse(entry["edge"]) if "edge" in entry else core.edge_of(pos)
    return Slot(
        pos=pos,
        layer=int(entry.get("layer", 0)),
        edge=edge,
        blocked=bool(entry.get("blocked", False)),
        used=bool(entry.get("used", False)),
    )


def load_problem(path: Union[str, Path]) -> Problem:
    """Load a placement problem from a YAML file."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ProblemFileError(f"Cannot read problem file {path}: {e}") from e

    problem = Problem.from_dict(data)
    problem.source_file = path
    logger.info(
        f"Loaded {path}: {len(problem.arena)} slots, {len(problem.pins)} pins, "
        f"{len(problem.pins.groups)} groups"
    )
    return problem


def result_to_dict(pins: PinTable, result: PlacementResult) -> Dict[str, Any]:
    """Serialize placed pin positions and diagnostics."""
    placed = {}
    for pin in pins:
        if pin.placed:
            placed[pin.name] = {"x": pin.pos.x, "y": pin.pos.y, "layer": pin.layer}
    return {
        "version": PROBLEM_FILE_VERSION,
        "pins": placed,
        "total_cost": result.total_cost,
        "unplaced": list(result.unplaced),
        "warnings": [d.message for d in result.warnings],
        "errors": [d.message for d in result.errors],
    }


def save_result(path: Union[str, Path], pins: PinTable, result: PlacementResult) -> None:
    """Write a placement result file."""
    with open(path, "w") as f:
        yaml.safe_dump(
            result_to_dict(pins, result),
            f,
            default_flow_style=False,
            sort_keys=False,
        )


def load_result(path: Union[str, Path]) -> Dict[str, Tuple[Point, int]]:
    """Read pin positions back from a result file.

    Returns:
        Dict of pin name -> (position, layer)
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return {
            name: (Point(int(p["x"]), int(p["y"])), int(p["layer"]))
            for name, p in (data.get("pins") or {}).items()
        }
    except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError, AttributeError) as e:
        raise ProblemFileError(f"Cannot read result file {path}: {e}") from e


def apply_result(problem: Problem, placements: Dict[str, Tuple[Point, int]]) -> None:
    """Replay stored placements onto a freshly loaded problem."""
    for name, (pos, layer) in placements.items():
        try:
            idx = problem.pins.index_of(name)
        except KeyError as e:
            raise ProblemFileError(f"Result references unknown pin '{name}'") from e
        problem.pins[idx].place(pos, layer)
        slot_idx = problem.arena.find_slot(pos, layer)
        if slot_idx is not None:
            problem.arena.mark_used(slot_idx)
