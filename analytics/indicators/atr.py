"""
Average True Range (ATR) indicator.
"""

from typing import List, Optional, Sequence

from ..models.indicator import IndicatorPoint
from ..models.ohlcv import Bar
from .base import validate_period


def true_range(current: Bar, previous: Optional[Bar]) -> float:
    """
    True range of a bar.

    Args:
        current: Bar to measure
        previous: Preceding bar, or None for the first bar of a series

    Returns:
        max(high-low, |high-prev close|, |low-prev close|); high-low without a previous bar
    """
    if previous is None:
        return current.high - current.low

    tr1 = current.high - current.low
    tr2 = abs(current.high - previous.close)
    tr3 = abs(current.low - previous.close)

    return max(tr1, tr2, tr3)


def calculate_atr(bars: Sequence[Bar], period: int = 14) -> List[IndicatorPoint]:
    """
    Compute ATR using the simple method.

    Args:
        bars: Bars sorted by time, ascending
        period: ATR period (default 14)

    Returns:
        Trailing mean of true ranges, one point per bar from index
        ``period - 1``; empty if insufficient bars
    """
    if not validate_period(period, len(bars)):
        return []

    true_ranges = [
        true_range(bar, bars[i - 1] if i > 0 else None)
        for i, bar in enumerate(bars)
    ]

    result = []
    for i in range(period - 1, len(bars)):
        atr = sum(true_ranges[i - period + 1:i + 1]) / period
        result.append(IndicatorPoint(time=bars[i].time, value=atr))

    return result
