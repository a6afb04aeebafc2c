"""
Placer Configuration

Tunables for sectioning and pass ordering. Configurations can be built in
code or loaded from a YAML file:

```yaml
slots_per_section: 200
slots_usage_factor: 0.8
strict_mirroring: true
assign_groups: true
```
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml


@dataclass
class PlacerConfig:
    """Configuration for I/O slot assignment."""
    # Sectioning
    slots_per_section: int = 200     # Max slots optimized together
    slots_usage_factor: float = 0.8  # Fraction of a section's free slots pins may fill

    # Passes
    strict_mirroring: bool = True    # Raise on mirrored positions with no slot
    assign_groups: bool = True       # Run the pin-group pass

    def validate(self) -> "PlacerConfig":
        """Check value ranges, returning self for chaining."""
        if self.slots_per_section < 1:
            raise ValueError(
                f"slots_per_section must be positive, got {self.slots_per_section}"
            )
        if not 0.0 < self.slots_usage_factor <= 1.0:
            raise ValueError(
                f"slots_usage_factor must be in (0, 1], got {self.slots_usage_factor}"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacerConfig":
        """Create from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown config key(s): {', '.join(sorted(unknown))}. "
                f"Available: {', '.join(sorted(known))}"
            )
        return cls(**data).validate()

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PlacerConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)
