"""
OHLCV data models for price bars and time series.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..errors import InvalidBarError


class PriceField(Enum):
    """Bar field an indicator reads its price from."""
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"


@dataclass(frozen=True)
class Bar:
    """Single OHLCV bar (immutable)."""
    time: int  # Unix seconds
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self):
        if self.high < self.low:
            raise InvalidBarError("High must be >= Low", field="high")
        if self.high < self.open or self.high < self.close:
            raise InvalidBarError("High must be >= Open and Close", field="high")
        if self.low > self.open or self.low > self.close:
            raise InvalidBarError("Low must be <= Open and Close", field="low")
        if self.volume < 0:
            raise InvalidBarError("Volume must be >= 0", field="volume")

    @property
    def timestamp(self) -> datetime:
        """Bar open time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.time, tz=timezone.utc)

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    @property
    def body_size(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        """High-low range."""
        return self.high - self.low

    @property
    def typical_price(self) -> float:
        """(high + low + close) / 3, the VWAP price."""
        return (self.high + self.low + self.close) / 3

    def price(self, field: PriceField) -> float:
        return getattr(self, field.value)

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class OHLCV:
    """Time series of OHLCV bars for one symbol/timeframe."""
    symbol: str
    bars: Tuple[Bar, ...]
    timeframe: str

    def __post_init__(self):
        if not isinstance(self.bars, tuple):
            object.__setattr__(self, 'bars', tuple(self.bars))

    @property
    def latest_bar(self) -> Optional[Bar]:
        """Get the most recent bar."""
        return self.bars[-1] if self.bars else None

    @property
    def length(self) -> int:
        """Number of bars."""
        return len(self.bars)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "timeframe": self.timeframe,
            "bars": [b.to_dict() for b in self.bars],
        }
