"""
Exception types raised by ioplacer.

Soft infeasibility (a pin forced onto a slot it does not like) is reported
as a warning and never raised. Geometry faults and malformed inputs are.
"""

from typing import Any, List, Tuple


class IOPlacerError(Exception):
    """Base class for ioplacer errors."""


class MirrorPositionError(IOPlacerError):
    """A mirrored pin's reflected position does not match any slot.

    This indicates an upstream slot-generation fault: the slot grid must
    already contain every reflected position.
    """

    def __init__(self, failures: List[Tuple[str, str, str]], result: Any = None):
        # (pin, partner, reason)
        self.failures = list(failures)
        # PlacementResult of the run that failed, when raised by IOPlacer
        self.result = result
        lines = [f"{pin} -> {partner}: {reason}" for pin, partner, reason in self.failures]
        super().__init__(
            f"{len(self.failures)} mirrored pin(s) could not be placed:\n  "
            + "\n  ".join(lines)
        )


class ProblemFileError(IOPlacerError):
    """A problem or result file could not be interpreted."""
