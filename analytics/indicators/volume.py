"""
Volume Weighted Average Price (VWAP).
"""

from typing import List, Sequence

from ..models.indicator import IndicatorPoint
from ..models.ohlcv import Bar
from .base import typical_price


def calculate_vwap(bars: Sequence[Bar]) -> List[IndicatorPoint]:
    """
    Calculate cumulative VWAP from the start of the series.

    While cumulative volume is still zero the bar's typical price is used.

    Args:
        bars: Normalized bars (ascending by time)

    Returns:
        One point per bar
    """
    result = []
    cumulative_tpv = 0.0
    cumulative_volume = 0.0

    for bar in bars:
        price = typical_price(bar)
        cumulative_tpv += price * bar.volume
        cumulative_volume += bar.volume

        vwap = cumulative_tpv / cumulative_volume if cumulative_volume > 0 else price
        result.append(IndicatorPoint(time=bar.time, value=vwap))

    return result
