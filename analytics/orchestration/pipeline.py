"""Analysis pipeline orchestration."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..data.normalizer import normalize_ohlcv
from ..errors import ValidationError
from ..heatmap.generator import HeatmapGenerator
from ..indicators.engine import IndicatorEngine
from ..models.config import Config
from ..models.heatmap import HeatmapData
from ..models.levels import Level, SwingPoint
from ..models.ohlcv import OHLCV
from ..structure.levels import find_nearest_resistance, find_nearest_support
from ..structure.support_resistance import SupportResistanceDetector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything derived from one (series, parameters) pair."""
    ohlcv: OHLCV
    indicators: Dict[str, List[Any]]
    swing_points: Tuple[SwingPoint, ...]
    levels: Tuple[Level, ...]
    heatmap: HeatmapData
    nearest_support: Optional[Level] = None
    nearest_resistance: Optional[Level] = None
    config_hash: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.ohlcv.symbol,
            "timeframe": self.ohlcv.timeframe,
            "bars": self.ohlcv.length,
            "config_hash": self.config_hash,
            "indicators": {
                key: [p.to_dict() for p in points]
                for key, points in self.indicators.items()
            },
            "swing_points": [s.to_dict() for s in self.swing_points],
            "levels": [level.to_dict() for level in self.levels],
            "nearest_support": self.nearest_support.to_dict() if self.nearest_support else None,
            "nearest_resistance": self.nearest_resistance.to_dict() if self.nearest_resistance else None,
            "heatmap": self.heatmap.to_dict(),
            "metadata": dict(self.metadata),
        }


class AnalyticsPipeline:
    """Main analysis pipeline orchestrator."""

    def __init__(self, config: Config = None):
        self.config = config or Config()
        self.indicator_engine = IndicatorEngine(self.config.indicator_configs)
        self.level_detector = SupportResistanceDetector(self.config.level_configs)
        self.heatmap_generator = HeatmapGenerator(self.config.heatmap_configs)

        # Counters
        self.runs = 0
        self.failures = 0
        self._lock = threading.Lock()

    def analyze(
        self,
        raw_bars: Any,
        symbol: str,
        timeframe: str,
        reference_price: Optional[float] = None
    ) -> AnalysisResult:
        """
        Normalize a raw series and run every analysis over it.

        Args:
            raw_bars: Raw bar sequence (dicts or Bars)
            symbol: Symbol name
            timeframe: Timeframe (e.g., '1d')
            reference_price: Price the nearest levels are resolved around;
                defaults to the last close

        Returns:
            AnalysisResult

        Raises:
            ValidationError: If the raw series is malformed
        """
        try:
            ohlcv = normalize_ohlcv(symbol, timeframe, raw_bars)
        except ValidationError as e:
            with self._lock:
                self.failures += 1
            logger.warning("series_rejected", extra={"symbol": symbol, "error": str(e)})
            raise

        with self._lock:
            self.runs += 1

        indicators = self.indicator_engine.compute(ohlcv.bars)
        swings = self.level_detector.swing_points(ohlcv)
        levels = self.level_detector.levels_from_swings(ohlcv, swings)
        heatmap = self.heatmap_generator.generate(ohlcv)

        if reference_price is None and ohlcv.latest_bar is not None:
            reference_price = ohlcv.latest_bar.close

        nearest_support = nearest_resistance = None
        if reference_price is not None:
            nearest_support = find_nearest_support(levels, reference_price)
            nearest_resistance = find_nearest_resistance(levels, reference_price)

        logger.info("series_analyzed", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": ohlcv.length,
            "swings": len(swings),
            "levels": len(levels),
            "zones": len(heatmap.zones)
        })

        return AnalysisResult(
            ohlcv=ohlcv,
            indicators=indicators,
            swing_points=tuple(swings),
            levels=tuple(levels),
            heatmap=heatmap,
            nearest_support=nearest_support,
            nearest_resistance=nearest_resistance,
            config_hash=self.config.config_hash.hash_value,
            metadata={"reference_price": reference_price}
        )

    def analyze_many(
        self,
        series: Dict[str, Any],
        timeframe: str,
        max_workers: int = 4
    ) -> Dict[str, AnalysisResult]:
        """
        Analyze several symbols concurrently.

        The analytics functions are pure, so symbols fan out over a thread
        pool without locking the data. The first ValidationError is re-raised.
        """
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {
                symbol: pool.submit(self.analyze, raw_bars, symbol, timeframe)
                for symbol, raw_bars in series.items()
            }
            return {symbol: future.result() for symbol, future in futures.items()}

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of pipeline activity."""
        summary = {
            "runs": self.runs,
            "failures": self.failures,
            "config_hash": self.config.config_hash.hash_value,
            "detectors": {
                d.name: d.get_summary() for d in (self.level_detector, self.heatmap_generator)
            },
        }
        logger.info(f"pipeline_summary runs={self.runs} failures={self.failures}")
        return summary
