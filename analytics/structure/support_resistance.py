"""Support/resistance level detector."""

import logging
from typing import Any, Dict, List

from ..models.levels import Level, SwingPoint
from ..models.ohlcv import OHLCV
from .detector import Detector
from .levels import (
    calculate_level_strength,
    calculate_levels,
    filter_significant_levels,
    get_resistance_levels,
    get_support_levels,
)
from .swings import detect_swing_points

logger = logging.getLogger(__name__)


class SupportResistanceDetector(Detector):
    """Detects support and resistance levels from swing points."""

    def __init__(self, config: Dict[str, Any] = None):
        config = config or {}

        # Set attributes BEFORE super().__init__()
        self.left_bars = config.get('left_bars', 5)
        self.right_bars = config.get('right_bars', 5)
        self.tolerance = float(config.get('tolerance', 0.5))
        self.min_strength = config.get('min_strength', 2)
        self.show_support = config.get('show_support', True)
        self.show_resistance = config.get('show_resistance', True)
        self.recalculate_strength = config.get('recalculate_strength', False)

        # Call super().__init__() AFTER attributes are set
        super().__init__('SupportResistanceDetector', config)

    def swing_points(self, data: OHLCV) -> List[SwingPoint]:
        if not self.enabled:
            return []
        return detect_swing_points(data.bars, self.left_bars, self.right_bars)

    def detect(self, data: OHLCV) -> List[Level]:
        """Detect levels in OHLCV data."""
        return self.levels_from_swings(data, self.swing_points(data))

    def levels_from_swings(self, data: OHLCV, swings: List[SwingPoint]) -> List[Level]:
        """Cluster, score and filter levels for already detected swings."""
        if not self.enabled:
            return []

        levels = calculate_levels(swings, self.tolerance)

        if self.recalculate_strength:
            levels = [calculate_level_strength(level, data.bars, self.tolerance) for level in levels]

        levels = filter_significant_levels(levels, self.min_strength)

        if not self.show_support:
            levels = get_resistance_levels(levels)
        if not self.show_resistance:
            levels = get_support_levels(levels)

        self._record(bool(levels))

        logger.debug("levels_detected", extra={
            "symbol": data.symbol,
            "swings": len(swings),
            "levels": len(levels)
        })

        return levels

    def _validate_parameters(self) -> None:
        """Validate level parameters."""
        for name in ('left_bars', 'right_bars', 'min_strength'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer")
        if self.left_bars < 0 or self.right_bars < 0:
            raise ValueError("left_bars and right_bars must be >= 0")
        if self.tolerance < 0:
            raise ValueError("tolerance must be >= 0")
