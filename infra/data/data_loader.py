"""
Data Loader - Switchable Source (Synthetic | CSV | Cache)

Provides a unified interface for loading raw OHLCV bars. Returned bars are
plain dicts with ``time`` in Unix seconds, ready for the normalizer.
"""

import logging
import math
import random
from typing import Dict, List, Optional
from enum import Enum
from datetime import datetime, timezone
import json
import os

import pandas as pd

from analytics.data.normalizer import normalize_timestamp
from .cache import BarCache

logger = logging.getLogger(__name__)

TIMEFRAME_SECONDS = {
    '1m': 60,
    '5m': 5 * 60,
    '15m': 15 * 60,
    '30m': 30 * 60,
    '1h': 60 * 60,
    '4h': 4 * 60 * 60,
    '1d': 24 * 60 * 60,
    '1w': 7 * 24 * 60 * 60,
    '1M': 30 * 24 * 60 * 60,
}

SYNTHETIC_BASE_VOLUME = 1_000_000

TIME_COLUMNS = ["time", "timestamp_utc", "timestamp", "datetime", "date"]


class DataSource(Enum):
    """Data source types."""
    SYNTHETIC = "synthetic"
    CSV = "csv"
    CACHE = "cache"


class DataLoader:
    """
    Unified data loader with switchable sources.

    Supports:
    - Synthetic random-walk data (tests, demos)
    - CSV files (pandas)
    - JSON cache files written by cache_data()
    """

    def __init__(self, config: Dict = None, cache: BarCache = None):
        """
        Initialize data loader.

        Args:
            config: Data loader config
                {
                  "source": "synthetic|csv|cache",
                  "synthetic": { "start_price", "trend", "volatility", "seed", "start_time" },
                  "csv": { "path": "..." },   # may contain {symbol} / {timeframe}
                  "cache": { "path": "..." }
                }
            cache: Optional in-memory cache consulted before the source
        """
        self.config = config or {}
        self.source = DataSource(self.config.get("source", "synthetic"))

        self.synthetic_config = self.config.get("synthetic", {})
        self.csv_config = self.config.get("csv", {})
        self.cache_config = self.config.get("cache", {})
        self.memory_cache = cache

        logger.info("Data loader initialized", extra={"source": self.source.value})

    def fetch_ohlcv(self, symbol: str, timeframe: str, count: int) -> Optional[List[Dict]]:
        """
        Fetch OHLCV data from configured source.

        Args:
            symbol: Symbol name (e.g., "AAPL")
            timeframe: Timeframe (e.g., "1d")
            count: Number of bars to fetch

        Returns:
            List of raw bar dicts (empty for count <= 0), or None if the source failed
        """
        if timeframe not in TIMEFRAME_SECONDS:
            raise ValueError(f"Unknown timeframe '{timeframe}'")

        if count <= 0:
            return []

        if self.memory_cache is not None:
            cached = self.memory_cache.get(symbol, timeframe)
            # A shorter cached series cannot serve a larger request
            if cached is not None and len(cached) >= count:
                return cached[-count:]

        if self.source == DataSource.SYNTHETIC:
            bars = self._fetch_synthetic(symbol, timeframe, count)
        elif self.source == DataSource.CSV:
            bars = self._fetch_csv(symbol, timeframe, count)
        else:
            bars = self._fetch_cached(symbol, timeframe, count)

        if bars is not None and self.memory_cache is not None:
            self.memory_cache.set(symbol, timeframe, bars)

        return bars

    def _fetch_synthetic(self, symbol: str, timeframe: str, count: int) -> List[Dict]:
        """
        Generate a random walk with drift.

        Each bar moves in three normally distributed steps from its open;
        high/low wrap those steps with a small random extension and volume
        grows with the size of the move.
        """
        start_price = float(self.synthetic_config.get("start_price", 100.0))
        trend = float(self.synthetic_config.get("trend", 0.0))
        volatility = float(self.synthetic_config.get("volatility", 0.02))
        rng = random.Random(self.synthetic_config.get("seed"))

        step = TIMEFRAME_SECONDS[timeframe]
        start_time = self.synthetic_config.get("start_time")
        if start_time is None:
            now = int(datetime.now(timezone.utc).timestamp())
            start_time = now - now % step - count * step

        drift = trend * volatility
        price = start_price
        bars = []

        for i in range(count):
            open_price = price
            change1 = rng.gauss(0, 1) * volatility * open_price
            change2 = rng.gauss(0, 1) * volatility * open_price
            change3 = rng.gauss(0, 1) * volatility * open_price

            price1 = open_price + change1
            price2 = price1 + change2
            close = price2 + change3 + drift * open_price

            high = max(open_price, price1, price2, close) * (1 + rng.random() * volatility * 0.5)
            low = min(open_price, price1, price2, close) * (1 - rng.random() * volatility * 0.5)

            move = abs(close - open_price) / open_price
            volume = math.floor(SYNTHETIC_BASE_VOLUME * (1 + move * 10) * (0.5 + rng.random()))

            bars.append({
                "time": int(start_time + i * step),
                "open": round(open_price, 2),
                "high": round(high, 2),
                "low": round(low, 2),
                "close": round(close, 2),
                "volume": volume,
            })
            price = close

        logger.info("Synthetic data generated", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": count
        })
        return bars

    def _fetch_csv(self, symbol: str, timeframe: str, count: int) -> Optional[List[Dict]]:
        """
        Fetch OHLCV data from CSV file.

        Column names are matched case-insensitively; the time column may
        hold epoch seconds/milliseconds or date strings.
        """
        csv_path = self.csv_config.get("path", "data/bars.csv").format(symbol=symbol, timeframe=timeframe)

        if not os.path.exists(csv_path):
            logger.error("CSV file not found", extra={"path": csv_path})
            return None

        try:
            df = pd.read_csv(csv_path)
            df.columns = [c.strip().lower() for c in df.columns]

            time_col = next((c for c in TIME_COLUMNS if c in df.columns), None)
            if time_col is None:
                logger.error("No timestamp column found in CSV", extra={"path": csv_path})
                return None

            if pd.api.types.is_numeric_dtype(df[time_col]):
                df["time"] = df[time_col].map(normalize_timestamp)
            else:
                parsed = pd.to_datetime(df[time_col], utc=True)
                epoch = pd.Timestamp("1970-01-01", tz="UTC")
                df["time"] = (parsed - epoch) // pd.Timedelta(seconds=1)

            if "volume" not in df.columns:
                df["volume"] = 0.0

            df = df.sort_values("time", kind="stable").tail(count)

            bars = [
                {
                    "time": int(row.time),
                    "open": float(row.open),
                    "high": float(row.high),
                    "low": float(row.low),
                    "close": float(row.close),
                    "volume": float(row.volume),
                }
                for row in df.itertuples(index=False)
            ]
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error("CSV load error", extra={"path": csv_path, "error": str(e)})
            return None

        logger.info("CSV data loaded", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": len(bars),
            "path": csv_path
        })
        return bars

    def _cache_file(self, symbol: str, timeframe: str) -> str:
        cache_path = self.cache_config.get("path", "data/cache")
        return os.path.join(cache_path, f"{symbol}_{timeframe}.json")

    def _fetch_cached(self, symbol: str, timeframe: str, count: int) -> Optional[List[Dict]]:
        """
        Fetch OHLCV data from a JSON cache file.

        Returns:
            Last ``count`` cached bars or None
        """
        cache_file = self._cache_file(symbol, timeframe)

        if not os.path.exists(cache_file):
            logger.warning("Cache file not found", extra={"file": cache_file})
            return None

        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Cache load error", extra={
                "file": cache_file,
                "error": str(e)
            })
            return None

        bars = data.get("bars", [])[-count:]

        logger.info("Cached data loaded", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": len(bars)
        })
        return bars

    def cache_data(self, symbol: str, timeframe: str, bars: List[Dict]) -> bool:
        """
        Cache OHLCV data for later use.

        Args:
            symbol: Symbol name
            timeframe: Timeframe
            bars: List of OHLCV dicts

        Returns:
            True if caching successful
        """
        cache_file = self._cache_file(symbol, timeframe)

        try:
            os.makedirs(os.path.dirname(cache_file), exist_ok=True)
            data = {
                "symbol": symbol,
                "timeframe": timeframe,
                "cached_at": datetime.now(timezone.utc).isoformat(),
                "bars": bars,
            }

            with open(cache_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except (OSError, TypeError) as e:
            logger.error("Cache write error", extra={
                "file": cache_file,
                "error": str(e)
            })
            return False

        logger.info("Data cached", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "file": cache_file,
            "bars": len(bars)
        })
        return True

    def switch_source(self, new_source: str) -> bool:
        """
        Switch data source at runtime.

        Args:
            new_source: New source ("synthetic", "csv", or "cache")

        Returns:
            True if switch successful
        """
        try:
            self.source = DataSource(new_source)
        except ValueError:
            logger.error("Unknown data source", extra={"source": new_source})
            return False

        logger.info("Data source switched", extra={"source": new_source})
        return True

    def get_source(self) -> str:
        """Get current data source."""
        return self.source.value
