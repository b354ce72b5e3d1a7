"""
Momentum oscillators: RSI and MACD.
"""

from typing import List, Sequence

from ..models.indicator import IndicatorPoint, MACDPoint
from ..models.ohlcv import Bar
from .base import validate_period
from .moving_average import calculate_ema, ema_from_values

RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    # Zero average loss means an infinite gain/loss ratio
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def calculate_rsi(bars: Sequence[Bar], period: int = 14) -> List[IndicatorPoint]:
    """
    Calculate Relative Strength Index with Wilder smoothing.

    Args:
        bars: Normalized bars (ascending by time)
        period: RSI period (default 14)

    Returns:
        One point per bar from index ``period``, values in [0, 100];
        empty if fewer than ``period + 1`` bars
    """
    if not validate_period(period, len(bars) - 1):
        return []

    gains = []
    losses = []
    for i in range(1, len(bars)):
        change = bars[i].close - bars[i - 1].close
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period

    result = [IndicatorPoint(time=bars[period].time, value=_rsi_value(avg_gain, avg_loss))]

    for i in range(period, len(gains)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result.append(IndicatorPoint(time=bars[i + 1].time, value=_rsi_value(avg_gain, avg_loss)))

    return result


def classify_rsi(value: float, overbought: float = RSI_OVERBOUGHT, oversold: float = RSI_OVERSOLD) -> str:
    """'overbought', 'oversold' or 'neutral'."""
    if value > overbought:
        return 'overbought'
    if value < oversold:
        return 'oversold'
    return 'neutral'


def calculate_macd(
    bars: Sequence[Bar],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9
) -> List[MACDPoint]:
    """
    Calculate MACD.

    The fast EMA is truncated by ``slow - fast`` leading points so both EMAs
    start at the same bar; the signal line is an EMA of the MACD values.

    Args:
        bars: Normalized bars (ascending by time)
        fast_period: Fast EMA period (default 12)
        slow_period: Slow EMA period (default 26)
        signal_period: Signal EMA period (default 9)

    Returns:
        MACD points; empty if fewer than ``slow + signal`` bars or the
        periods are invalid
    """
    periods = (fast_period, slow_period, signal_period)
    if not all(validate_period(p, len(bars)) for p in periods):
        return []
    if fast_period >= slow_period or len(bars) < slow_period + signal_period:
        return []

    fast_ema = calculate_ema(bars, fast_period)
    slow_ema = calculate_ema(bars, slow_period)

    offset = slow_period - fast_period
    macd_line = [
        IndicatorPoint(time=slow.time, value=fast_ema[offset + i].value - slow.value)
        for i, slow in enumerate(slow_ema)
    ]

    signal_line = ema_from_values(macd_line, signal_period)

    result = []
    for i, signal in enumerate(signal_line):
        macd_value = macd_line[signal_period - 1 + i].value
        result.append(MACDPoint(
            time=signal.time,
            macd=macd_value,
            signal=signal.value,
            histogram=macd_value - signal.value
        ))

    return result
