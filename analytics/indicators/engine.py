"""Indicator engine - computes every configured indicator over a series."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from ..models.ohlcv import Bar
from .atr import calculate_atr
from .momentum import calculate_macd, calculate_rsi
from .moving_average import calculate_ema, calculate_sma
from .volume import calculate_vwap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndicatorSpec:
    """Registered indicator calculator with its default parameters."""
    name: str
    func: Callable[..., List[Any]]
    defaults: Dict[str, Any] = field(default_factory=dict)

    def compute(self, bars: Sequence[Bar], params: Dict[str, Any]) -> List[Any]:
        kwargs = dict(self.defaults)
        kwargs.update(params)
        return self.func(bars, **kwargs)


INDICATOR_REGISTRY: Dict[str, IndicatorSpec] = {
    'sma': IndicatorSpec('sma', calculate_sma, {'period': 50, 'price_field': 'close'}),
    'ema': IndicatorSpec('ema', calculate_ema, {'period': 20, 'price_field': 'close'}),
    'rsi': IndicatorSpec('rsi', calculate_rsi, {'period': 14}),
    'macd': IndicatorSpec('macd', calculate_macd, {'fast_period': 12, 'slow_period': 26, 'signal_period': 9}),
    'vwap': IndicatorSpec('vwap', calculate_vwap),
    'atr': IndicatorSpec('atr', calculate_atr, {'period': 14}),
}

DEFAULT_INDICATORS: Dict[str, Dict[str, Any]] = {
    'ema20': {'type': 'ema', 'period': 20},
    'ema50': {'type': 'ema', 'period': 50},
    'ema200': {'type': 'ema', 'period': 200},
    'sma50': {'type': 'sma', 'period': 50},
    'rsi14': {'type': 'rsi', 'period': 14},
    'macd': {'type': 'macd', 'fast_period': 12, 'slow_period': 26, 'signal_period': 9},
    'vwap': {'type': 'vwap'},
}

# Keys in an indicator entry that are not calculator parameters
_RESERVED_KEYS = ('type', 'enabled')


class IndicatorEngine:
    """Computes the configured set of indicators."""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize engine.

        Args:
            config: Indicator configuration, ``{"indicators": {key: entry}}``
                where each entry names a registered ``type`` plus parameters.
                Falls back to DEFAULT_INDICATORS when absent.
        """
        self.config = config or {}
        self.entries: Dict[str, Dict[str, Any]] = {}
        self._initialize_entries()

    def _initialize_entries(self):
        """Resolve enabled entries against the registry."""
        entries = self.config.get('indicators')
        if entries is None:
            entries = DEFAULT_INDICATORS

        for key, entry in entries.items():
            if not entry.get('enabled', True):
                continue

            indicator_type = entry.get('type', key)
            if indicator_type not in INDICATOR_REGISTRY:
                raise ValueError(f"Unknown indicator type '{indicator_type}' for '{key}'")

            spec = INDICATOR_REGISTRY[indicator_type]
            params = {k: v for k, v in entry.items() if k not in _RESERVED_KEYS}
            unknown = set(params) - set(spec.defaults)
            if unknown:
                raise ValueError(f"Unknown parameters {sorted(unknown)} for indicator '{key}'")

            self.entries[key] = {'type': indicator_type, 'params': params}

        logger.info(f"Initialized {len(self.entries)} indicators: {list(self.entries)}")

    def compute(self, bars: Sequence[Bar]) -> Dict[str, List[Any]]:
        """
        Compute every configured indicator.

        Returns:
            Mapping of entry key to its point list; an empty list means the
            series is too short for that indicator
        """
        results = {}
        for key, entry in self.entries.items():
            spec = INDICATOR_REGISTRY[entry['type']]
            results[key] = spec.compute(bars, entry['params'])

        insufficient = [key for key, points in results.items() if not points]
        if insufficient:
            logger.debug("indicators_insufficient_data", extra={
                "bars": len(bars),
                "indicators": insufficient
            })

        return results
