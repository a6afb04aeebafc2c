"""Cost values exchanged between the cost oracle, matrix builder and solver.

Infeasibility is carried as an explicit variant so no arithmetic ever runs
on the sentinel. The sentinel integer only exists at the solver boundary
(:meth:`Cost.to_solver`).
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..core.abstraction import Point

# Largest 32-bit signed int; what an infeasible cell looks like to the solver
HUNGARIAN_FAIL = 2 ** 31 - 1


@dataclass(frozen=True)
class Cost:
    """Either a finite integer cost or infeasible (``value is None``)."""
    value: Optional[int]

    @classmethod
    def finite(cls, value: int) -> "Cost":
        return cls(int(value))

    @classmethod
    def coerce(cls, value: Union["Cost", int, None]) -> "Cost":
        """Normalize an oracle return value.

        Accepts a Cost, a plain int, ``None`` or the raw sentinel; the last
        two mean infeasible.
        """
        if isinstance(value, Cost):
            return value
        if value is None or value >= HUNGARIAN_FAIL:
            return INFEASIBLE
        return cls(int(value))

    @property
    def feasible(self) -> bool:
        return self.value is not None

    def __add__(self, other: "Cost") -> "Cost":
        if not self.feasible or not other.feasible:
            return INFEASIBLE
        return Cost(self.value + other.value)

    def to_solver(self) -> int:
        return self.value if self.feasible else HUNGARIAN_FAIL

    def __repr__(self) -> str:
        return f"Cost({self.value})" if self.feasible else "INFEASIBLE"


INFEASIBLE = Cost(None)
ZERO = Cost(0)


class CostOracle:
    """Interface for the external net-length cost model.

    ``cost`` must be pure and deterministic: matrix building calls it once
    per (pin, slot) pair and may call it again for the same pair.
    """

    def cost(self, pin_index: int, position: Point) -> Union[Cost, int]:
        raise NotImplementedError


class CallableOracle(CostOracle):
    """Adapt a plain ``f(pin_index, position)`` function to the oracle interface."""

    def __init__(self, func):
        self._func = func

    def cost(self, pin_index: int, position: Point) -> Union[Cost, int]:
        return self._func(pin_index, position)
