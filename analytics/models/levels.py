"""Swing point and support/resistance level models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class SwingKind(Enum):
    """Kind of local extremum."""
    HIGH = "high"
    LOW = "low"


class LevelKind(Enum):
    """Role a price level plays."""
    SUPPORT = "support"
    RESISTANCE = "resistance"


@dataclass(frozen=True)
class SwingPoint:
    """Local extremum relative to a symmetric bar window (immutable)."""
    time: int
    price: float
    kind: SwingKind
    index: int

    @property
    def is_high(self) -> bool:
        return self.kind == SwingKind.HIGH

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "price": self.price,
            "kind": self.kind.value,
            "index": self.index,
        }


@dataclass(frozen=True)
class Level:
    """Clustered support or resistance price band (immutable)."""
    price: float
    kind: LevelKind
    strength: int
    touch_timestamps: Tuple[int, ...] = field(default_factory=tuple)
    color: str = ""

    def __post_init__(self):
        if not isinstance(self.touch_timestamps, tuple):
            object.__setattr__(self, 'touch_timestamps', tuple(self.touch_timestamps))

    @property
    def is_support(self) -> bool:
        return self.kind == LevelKind.SUPPORT

    @property
    def is_resistance(self) -> bool:
        return self.kind == LevelKind.RESISTANCE

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "kind": self.kind.value,
            "strength": self.strength,
            "touch_timestamps": list(self.touch_timestamps),
            "color": self.color,
        }
