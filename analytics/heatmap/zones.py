"""
Price zone density ("heatmap") calculation.

The series' low-high range is tiled with fixed-height zones and every zone
is scored by how often bars touched it, how much volume traded inside it and
how many reversals pivoted there.
"""

import logging
import math
from dataclasses import replace
from typing import List, Optional, Sequence

from ..models.heatmap import HeatmapData, PriceZone
from ..models.ohlcv import Bar

logger = logging.getLogger(__name__)

DEFAULT_TARGET_ZONES = 75
# Brings raw volume onto the scale of touch counts
VOLUME_NORMALIZATION = 1_000_000
REVERSAL_WEIGHT = 2


def _usable_height(zone_height: Optional[float]) -> bool:
    return zone_height is not None and math.isfinite(zone_height) and zone_height > 0


def calculate_price_zones(
    bars: Sequence[Bar],
    zone_height: Optional[float] = None,
    target_zones: int = DEFAULT_TARGET_ZONES
) -> List[PriceZone]:
    """
    Divide the series' price range into contiguous zones.

    Args:
        bars: Normalized bars
        zone_height: Price units per zone; derived as range / target_zones
            when missing, non-positive or non-finite
        target_zones: Zone count aimed for by the derived height

    Returns:
        Zones from the lowest low upwards; the last zone ends exactly at the
        highest high. A flat series yields one zero-height zone.
    """
    if not bars:
        return []

    min_price = min(b.low for b in bars)
    max_price = max(b.high for b in bars)
    price_range = max_price - min_price

    if price_range == 0:
        return [PriceZone(price_start=min_price, price_end=max_price)]

    if not _usable_height(zone_height):
        zone_height = price_range / target_zones

    zones = []
    current = min_price
    while current < max_price:
        zones.append(PriceZone(price_start=current, price_end=min(current + zone_height, max_price)))
        following = current + zone_height
        if following == current:
            logger.warning("zone_height_below_precision", extra={"zone_height": zone_height})
            break
        current = following

    return zones


def _overlap_ratio(bar: Bar, zone: PriceZone) -> float:
    """Fraction of the bar's range inside the zone (1 for a single-price bar)."""
    bar_range = bar.high - bar.low
    if bar_range == 0:
        return 1.0

    overlap_start = max(bar.low, zone.price_start)
    overlap_end = min(bar.high, zone.price_end)
    return max(0.0, overlap_end - overlap_start) / bar_range


def _is_reversal(prev_bar: Bar, bar: Bar, zone: PriceZone) -> bool:
    """Bearish-to-bullish turn off a low in the zone, or the mirror off a high."""
    bullish = prev_bar.is_bearish and bar.is_bullish and zone.contains(prev_bar.low)
    bearish = prev_bar.is_bullish and bar.is_bearish and zone.contains(prev_bar.high)
    return bullish or bearish


def calculate_zone_density(
    bars: Sequence[Bar],
    zones: Sequence[PriceZone],
    volume_divisor: float = VOLUME_NORMALIZATION
) -> List[PriceZone]:
    """
    Score each zone.

    raw density = touches + reversal bonus + overlap-weighted volume / volume_divisor

    Returns:
        New zones with ``raw_density`` set and ``normalized_density`` at 0
    """
    if not bars or not zones:
        return list(zones)

    touches = [0] * len(zones)
    volume = [0.0] * len(zones)
    reversals = [0] * len(zones)

    for i, bar in enumerate(bars):
        prev_bar = bars[i - 1] if i > 0 else None

        for j, zone in enumerate(zones):
            if bar.low > zone.price_end or bar.high < zone.price_start:
                continue

            touches[j] += 1
            volume[j] += bar.volume * _overlap_ratio(bar, zone)

            if prev_bar is not None and _is_reversal(prev_bar, bar, zone):
                reversals[j] += REVERSAL_WEIGHT

    return [
        replace(
            zone,
            raw_density=touches[j] + reversals[j] + volume[j] / volume_divisor,
            normalized_density=0.0
        )
        for j, zone in enumerate(zones)
    ]


def normalize_heatmap_data(zones: Sequence[PriceZone]) -> HeatmapData:
    """
    Min-max rescale raw densities to [0, 1].

    If every zone has the same density all normalized values are 0.
    """
    if not zones:
        return HeatmapData(zones=(), max_density=0.0, min_density=0.0)

    min_density = min(z.raw_density for z in zones)
    max_density = max(z.raw_density for z in zones)
    density_range = max_density - min_density

    normalized = tuple(
        replace(z, normalized_density=(z.raw_density - min_density) / density_range if density_range > 0 else 0.0)
        for z in zones
    )

    return HeatmapData(zones=normalized, max_density=max_density, min_density=min_density)


def generate_heatmap_data(
    bars: Sequence[Bar],
    zone_height: Optional[float] = None,
    target_zones: int = DEFAULT_TARGET_ZONES,
    volume_divisor: float = VOLUME_NORMALIZATION
) -> HeatmapData:
    """Zones, densities and normalization in one call."""
    zones = calculate_price_zones(bars, zone_height, target_zones)
    return normalize_heatmap_data(calculate_zone_density(bars, zones, volume_divisor))


def find_zone_for_price(zones: Sequence[PriceZone], price: float) -> int:
    """Index of the first zone containing ``price``, or -1."""
    for i, zone in enumerate(zones):
        if zone.contains(price):
            return i
    return -1


def get_high_density_zones(heatmap: HeatmapData, top_percentile: float = 0.2) -> List[PriceZone]:
    """
    Top fraction of zones by normalized density.

    Ties keep their price order. ``top_percentile`` is clamped to [0, 1].
    """
    fraction = max(0.0, min(1.0, top_percentile))
    ordered = sorted(heatmap.zones, key=lambda z: z.normalized_density, reverse=True)
    count = math.ceil(len(ordered) * fraction)
    return ordered[:count]


def calculate_average_zone_height(zones: Sequence[PriceZone]) -> float:
    if not zones:
        return 0.0
    return sum(z.height for z in zones) / len(zones)
