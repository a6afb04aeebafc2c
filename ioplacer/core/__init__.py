"""Boundary model: slots, sections, pins and the core rectangle."""

from .abstraction import (
    Edge,
    Point,
    Slot,
    SlotArena,
    Section,
    IOPin,
    PinGroup,
    PinTable,
)
from .boundary import Core

__all__ = [
    "Edge",
    "Point",
    "Slot",
    "SlotArena",
    "Section",
    "IOPin",
    "PinGroup",
    "PinTable",
    "Core",
]
