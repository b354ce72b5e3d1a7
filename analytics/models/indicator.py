"""
Indicator output points.
"""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class IndicatorPoint:
    """Single-line indicator value at a bar time."""
    time: int
    value: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class MACDPoint:
    """MACD line, signal line and histogram at a bar time."""
    time: int
    macd: float
    signal: float
    histogram: float

    def to_dict(self) -> dict:
        return asdict(self)
