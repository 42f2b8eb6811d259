"""
Brick Resampling Configuration

Centralized configuration for brick resampling parameters.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict

from .constants import DEFAULT_STEP_SIZE, MAX_BRICKS_PER_BAR


@dataclass(frozen=True)
class BrickConfig:
    """
    All configurable parameters for brick resampling.

    Attributes:
        step_size: Price distance covered by one brick. Bricks open and close
            on multiples of this value.
        max_bricks_per_bar: Maximum bricks one source bar may emit before the
            run is rejected as degenerate.

    Example:
        >>> config = BrickConfig.default()
        >>> config.with_step_size(10).step_size
        10
    """
    step_size: float = DEFAULT_STEP_SIZE
    max_bricks_per_bar: int = MAX_BRICKS_PER_BAR

    @classmethod
    def default(cls) -> "BrickConfig":
        """Create a config with default values."""
        return cls()

    def with_step_size(self, step_size: float) -> "BrickConfig":
        """
        Create a new config with a different step size.

        Since BrickConfig is frozen, this creates a new instance.
        """
        return BrickConfig(
            step_size=step_size,
            max_bricks_per_bar=self.max_bricks_per_bar,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrickConfig":
        """Deserialize from dictionary, falling back to defaults for missing keys."""
        return cls(
            step_size=float(data.get("step_size", DEFAULT_STEP_SIZE)),
            max_bricks_per_bar=int(data.get("max_bricks_per_bar", MAX_BRICKS_PER_BAR)),
        )
