"""
Support/resistance level clustering and queries.

Levels are built from swing points with a single left-to-right sweep over
swings sorted by price. Each cluster is anchored on its lowest unassigned
swing and absorbs later swings within ``seed.price * tolerance / 100`` of
that seed; the band is never re-centred as members are added.
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from ..colors import level_color
from ..models.levels import Level, LevelKind, SwingKind, SwingPoint
from ..models.ohlcv import Bar


def _tolerance_range(price: float, tolerance: float) -> float:
    return price * (tolerance / 100)


def calculate_levels(swings: Sequence[SwingPoint], tolerance: float = 0.5) -> List[Level]:
    """
    Cluster nearby swing points into levels.

    Args:
        swings: Swing points (any order)
        tolerance: Cluster band as a percentage of the seed price (0.5 = 0.5%)

    Returns:
        Levels in ascending price order of their seed swing
    """
    if not swings:
        return []

    ordered = sorted(swings, key=lambda s: s.price)
    used = set()
    levels = []

    for i, seed in enumerate(ordered):
        if i in used:
            continue

        cluster = [seed]
        used.add(i)
        band = _tolerance_range(seed.price, tolerance)

        for j in range(i + 1, len(ordered)):
            if j in used:
                continue
            other = ordered[j]
            if abs(other.price - seed.price) <= band:
                cluster.append(other)
                used.add(j)
            elif other.price > seed.price + band:
                break

        price = sum(s.price for s in cluster) / len(cluster)

        # Equal counts resolve to support
        high_count = sum(1 for s in cluster if s.kind == SwingKind.HIGH)
        low_count = len(cluster) - high_count
        kind = LevelKind.RESISTANCE if high_count > low_count else LevelKind.SUPPORT

        levels.append(Level(
            price=price,
            kind=kind,
            strength=len(cluster),
            touch_timestamps=tuple(s.time for s in cluster),
            color=level_color(len(cluster), kind)
        ))

    return levels


def calculate_level_strength(level: Level, bars: Sequence[Bar], tolerance: float = 0.5) -> Level:
    """
    Re-derive a level's strength from bars touching it.

    A support is touched by a bar whose low lies within the tolerance band;
    a resistance by a bar whose high does. Every bar of the series counts.

    Returns:
        New Level with strength, touch timestamps and colour recomputed
    """
    band = _tolerance_range(level.price, tolerance)
    lower, upper = level.price - band, level.price + band

    if level.is_support:
        touches = tuple(b.time for b in bars if lower <= b.low <= upper)
    else:
        touches = tuple(b.time for b in bars if lower <= b.high <= upper)

    return replace(
        level,
        strength=len(touches),
        touch_timestamps=touches,
        color=level_color(len(touches), level.kind)
    )


def filter_significant_levels(levels: Sequence[Level], min_strength: int = 2) -> List[Level]:
    """Drop levels weaker than ``min_strength``."""
    return [level for level in levels if level.strength >= min_strength]


def get_support_levels(levels: Sequence[Level]) -> List[Level]:
    return [level for level in levels if level.kind == LevelKind.SUPPORT]


def get_resistance_levels(levels: Sequence[Level]) -> List[Level]:
    return [level for level in levels if level.kind == LevelKind.RESISTANCE]


def find_nearest_support(levels: Sequence[Level], current_price: float) -> Optional[Level]:
    """Highest support strictly below ``current_price``, or None."""
    below = [level for level in get_support_levels(levels) if level.price < current_price]
    if not below:
        return None
    return max(below, key=lambda level: level.price)


def find_nearest_resistance(levels: Sequence[Level], current_price: float) -> Optional[Level]:
    """Lowest resistance strictly above ``current_price``, or None."""
    above = [level for level in get_resistance_levels(levels) if level.price > current_price]
    if not above:
        return None
    return min(above, key=lambda level: level.price)


def is_price_near_level(price: float, level: Level, tolerance: float = 0.5) -> bool:
    return abs(price - level.price) <= _tolerance_range(level.price, tolerance)


def sort_levels_by_strength(levels: Sequence[Level]) -> List[Level]:
    """Strongest first; equal strengths keep their input order."""
    return sorted(levels, key=lambda level: level.strength, reverse=True)


def sort_levels_by_price(levels: Sequence[Level], ascending: bool = True) -> List[Level]:
    return sorted(levels, key=lambda level: level.price, reverse=not ascending)


def get_price_range(bars: Sequence[Bar]) -> Tuple[float, float]:
    """(lowest low, highest high); (0, 0) for no bars."""
    if not bars:
        return 0.0, 0.0
    return min(b.low for b in bars), max(b.high for b in bars)
