"""
Swing point detection.

A swing high is a high strictly above the ``left_bars`` highs before it and
the ``right_bars`` highs after it; swing lows mirror this with lows. Bars
too close to either end of the series can never be swings.
"""

from typing import List, Sequence

from ..models.levels import SwingKind, SwingPoint
from ..models.ohlcv import Bar


def _windows_valid(left_bars: int, right_bars: int) -> bool:
    return left_bars >= 0 and right_bars >= 0


def detect_swing_highs(bars: Sequence[Bar], left_bars: int = 5, right_bars: int = 5) -> List[SwingPoint]:
    """
    Detect swing highs.

    Args:
        bars: Normalized bars (ascending by time)
        left_bars: Bars that must be lower on the left
        right_bars: Bars that must be lower on the right

    Returns:
        Swing highs in time order
    """
    if not _windows_valid(left_bars, right_bars):
        return []

    swings = []
    for i in range(left_bars, len(bars) - right_bars):
        current = bars[i].high
        left = all(bars[i - j].high < current for j in range(1, left_bars + 1))
        if left and all(bars[i + j].high < current for j in range(1, right_bars + 1)):
            swings.append(SwingPoint(time=bars[i].time, price=current, kind=SwingKind.HIGH, index=i))

    return swings


def detect_swing_lows(bars: Sequence[Bar], left_bars: int = 5, right_bars: int = 5) -> List[SwingPoint]:
    """Detect swing lows (mirror of detect_swing_highs)."""
    if not _windows_valid(left_bars, right_bars):
        return []

    swings = []
    for i in range(left_bars, len(bars) - right_bars):
        current = bars[i].low
        left = all(bars[i - j].low > current for j in range(1, left_bars + 1))
        if left and all(bars[i + j].low > current for j in range(1, right_bars + 1)):
            swings.append(SwingPoint(time=bars[i].time, price=current, kind=SwingKind.LOW, index=i))

    return swings


def detect_swing_points(bars: Sequence[Bar], left_bars: int = 5, right_bars: int = 5) -> List[SwingPoint]:
    """All swing highs and lows, stably sorted by time (highs first on ties)."""
    highs = detect_swing_highs(bars, left_bars, right_bars)
    lows = detect_swing_lows(bars, left_bars, right_bars)
    return sorted(highs + lows, key=lambda s: s.time)
