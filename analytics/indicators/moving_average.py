"""
Simple and exponential moving averages.
"""

from typing import List, Sequence, Union

from ..models.indicator import IndicatorPoint
from ..models.ohlcv import Bar, PriceField
from .base import price_values, validate_period


def calculate_sma(
    bars: Sequence[Bar],
    period: int,
    price_field: Union[PriceField, str] = PriceField.CLOSE
) -> List[IndicatorPoint]:
    """
    Calculate Simple Moving Average.

    Args:
        bars: Normalized bars (ascending by time)
        period: Number of bars averaged
        price_field: Which price to use (default close)

    Returns:
        One point per bar from index ``period - 1``; empty if insufficient bars
    """
    if not validate_period(period, len(bars)):
        return []

    prices = price_values(bars, price_field)
    result = []

    for i in range(period - 1, len(bars)):
        total = 0.0
        for j in range(period):
            total += prices[i - j]
        result.append(IndicatorPoint(time=bars[i].time, value=total / period))

    return result


def _ema(times: Sequence[int], values: Sequence[float], period: int) -> List[IndicatorPoint]:
    multiplier = 2 / (period + 1)

    # Seed with the SMA of the first `period` values
    total = 0.0
    for i in range(period):
        total += values[i]
    ema = total / period

    result = [IndicatorPoint(time=times[period - 1], value=ema)]
    for i in range(period, len(values)):
        ema = (values[i] - ema) * multiplier + ema
        result.append(IndicatorPoint(time=times[i], value=ema))

    return result


def calculate_ema(
    bars: Sequence[Bar],
    period: int,
    price_field: Union[PriceField, str] = PriceField.CLOSE
) -> List[IndicatorPoint]:
    """
    Calculate Exponential Moving Average.

    The first value is the SMA of the first ``period`` prices; later values
    use the recurrence ``ema = (price - ema) * 2/(period+1) + ema``.

    Returns:
        ``len(bars) - period + 1`` points; empty if insufficient bars
    """
    if not validate_period(period, len(bars)):
        return []

    return _ema([b.time for b in bars], price_values(bars, price_field), period)


def ema_from_values(points: Sequence[IndicatorPoint], period: int) -> List[IndicatorPoint]:
    """EMA over an already computed indicator series (e.g. the MACD line)."""
    if not validate_period(period, len(points)):
        return []

    return _ema([p.time for p in points], [p.value for p in points], period)
