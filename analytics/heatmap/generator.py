"""Heatmap generator - configured density scoring over a series."""

import logging
from typing import Any, Dict, List

from ..colors import as_color_scheme, get_heatmap_color_with_opacity
from ..models.heatmap import HeatmapData
from ..models.ohlcv import OHLCV
from ..structure.detector import Detector
from .zones import DEFAULT_TARGET_ZONES, VOLUME_NORMALIZATION, generate_heatmap_data

logger = logging.getLogger(__name__)


class HeatmapGenerator(Detector):
    """Scores price zones by reaction density."""

    def __init__(self, config: Dict[str, Any] = None):
        config = config or {}

        # Set attributes BEFORE super().__init__()
        self.zone_height = config.get('zone_height')
        self.target_zones = config.get('target_zones', DEFAULT_TARGET_ZONES)
        self.volume_divisor = float(config.get('volume_divisor', VOLUME_NORMALIZATION))
        self.color_scheme = as_color_scheme(config.get('color_scheme', 'blue-red'))
        self.opacity = float(config.get('opacity', 0.6))

        # Call super().__init__() AFTER attributes are set
        super().__init__('HeatmapGenerator', config)

    def detect(self, data: OHLCV) -> HeatmapData:
        return self.generate(data)

    def generate(self, data: OHLCV) -> HeatmapData:
        """Generate normalized heatmap data for a series."""
        if not self.enabled:
            return HeatmapData(zones=())

        heatmap = generate_heatmap_data(
            data.bars,
            zone_height=self.zone_height,
            target_zones=self.target_zones,
            volume_divisor=self.volume_divisor
        )
        self._record(bool(heatmap.zones))

        logger.debug("heatmap_generated", extra={
            "symbol": data.symbol,
            "zones": len(heatmap.zones),
            "max_density": heatmap.max_density
        })

        return heatmap

    def colorize(self, heatmap: HeatmapData) -> List[str]:
        """RGBA colour per zone using the configured scheme and opacity."""
        return [
            get_heatmap_color_with_opacity(zone.normalized_density, self.opacity, self.color_scheme)
            for zone in heatmap.zones
        ]

    def _validate_parameters(self) -> None:
        """Validate heatmap parameters."""
        if isinstance(self.target_zones, bool) or not isinstance(self.target_zones, int) or self.target_zones <= 0:
            raise ValueError("target_zones must be a positive integer")
        if self.volume_divisor <= 0:
            raise ValueError("volume_divisor must be > 0")
        if not 0 <= self.opacity <= 1:
            raise ValueError("opacity must be within [0, 1]")
