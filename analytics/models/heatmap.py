"""Price zone and heatmap models."""

from dataclasses import dataclass, asdict
from typing import Tuple


@dataclass(frozen=True)
class PriceZone:
    """Fixed-height price band with its reaction density."""
    price_start: float
    price_end: float
    raw_density: float = 0.0
    normalized_density: float = 0.0

    @property
    def height(self) -> float:
        return self.price_end - self.price_start

    def contains(self, price: float) -> bool:
        return self.price_start <= price <= self.price_end

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class HeatmapData:
    """Normalized zones plus the raw density extremes."""
    zones: Tuple[PriceZone, ...]
    max_density: float = 0.0
    min_density: float = 0.0

    def __post_init__(self):
        if not isinstance(self.zones, tuple):
            object.__setattr__(self, 'zones', tuple(self.zones))

    def to_dict(self) -> dict:
        return {
            "zones": [z.to_dict() for z in self.zones],
            "max_density": self.max_density,
            "min_density": self.min_density,
        }
