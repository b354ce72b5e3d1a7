import unittest

import pytest

from analytics.data.normalizer import normalize_series
from infra.data.cache import BarCache
from infra.data.data_loader import TIMEFRAME_SECONDS, DataLoader, DataSource

START = 1_700_000_000


def synthetic_config(seed=42, **overrides):
    synthetic = {"start_price": 100.0, "trend": 0.0, "volatility": 0.02, "seed": seed, "start_time": START}
    synthetic.update(overrides)
    return {"source": "synthetic", "synthetic": synthetic}


class TestSyntheticSource(unittest.TestCase):
    def test_reproducible_with_seed(self):
        first = DataLoader(synthetic_config()).fetch_ohlcv('SYN', '1h', 100)
        second = DataLoader(synthetic_config()).fetch_ohlcv('SYN', '1h', 100)
        self.assertEqual(first, second)

    def test_seed_changes_series(self):
        first = DataLoader(synthetic_config(seed=1)).fetch_ohlcv('SYN', '1h', 50)
        second = DataLoader(synthetic_config(seed=2)).fetch_ohlcv('SYN', '1h', 50)
        self.assertNotEqual(first, second)

    def test_bars_are_valid_and_spaced(self):
        bars = DataLoader(synthetic_config()).fetch_ohlcv('SYN', '15m', 200)
        self.assertEqual(len(bars), 200)

        normalized = normalize_series(bars)
        self.assertEqual(len(normalized), 200)
        self.assertEqual(normalized[0].time, START)
        self.assertEqual(normalized[1].time - normalized[0].time, TIMEFRAME_SECONDS['15m'])
        self.assertEqual(normalized[0].open, 100.0)

    def test_prices_rounded(self):
        bars = DataLoader(synthetic_config()).fetch_ohlcv('SYN', '1d', 30)
        for bar in bars:
            for field in ('open', 'high', 'low', 'close'):
                self.assertEqual(bar[field], round(bar[field], 2))
            self.assertGreater(bar['volume'], 0)

    def test_unknown_timeframe(self):
        with self.assertRaises(ValueError):
            DataLoader(synthetic_config()).fetch_ohlcv('SYN', '2h', 10)


class TestCsvSource:
    def _loader(self, path):
        return DataLoader({"source": "csv", "csv": {"path": str(path)}})

    def test_iso_timestamps(self, tmp_path):
        csv_file = tmp_path / "bars.csv"
        csv_file.write_text(
            "Timestamp,Open,High,Low,Close,Volume\n"
            "2024-01-02T00:00:00Z,11,12,10,11.5,200\n"
            "2024-01-01T00:00:00Z,10,11,9,10.5,100\n",
            encoding="utf-8"
        )
        bars = self._loader(csv_file).fetch_ohlcv("AAPL", "1d", 10)

        assert [b["time"] for b in bars] == [1704067200, 1704153600]
        assert bars[0]["close"] == 10.5
        assert bars[1]["volume"] == 200.0

    def test_epoch_milliseconds(self, tmp_path):
        csv_file = tmp_path / "bars.csv"
        csv_file.write_text(
            "time,open,high,low,close\n"
            "1704067200000,10,11,9,10.5\n",
            encoding="utf-8"
        )
        bars = self._loader(csv_file).fetch_ohlcv("AAPL", "1d", 10)
        assert bars == [{"time": 1704067200, "open": 10.0, "high": 11.0, "low": 9.0, "close": 10.5, "volume": 0.0}]

    def test_count_keeps_latest(self, tmp_path):
        rows = "\n".join(f"{1704067200 + i * 86400},10,11,9,10,1" for i in range(5))
        csv_file = tmp_path / "bars.csv"
        csv_file.write_text("time,open,high,low,close,volume\n" + rows + "\n", encoding="utf-8")

        bars = self._loader(csv_file).fetch_ohlcv("AAPL", "1d", 2)
        assert [b["time"] for b in bars] == [1704067200 + 3 * 86400, 1704067200 + 4 * 86400]

    def test_symbol_in_path(self, tmp_path):
        (tmp_path / "MSFT.csv").write_text("time,open,high,low,close\n60,1,2,0.5,1\n", encoding="utf-8")
        loader = self._loader(tmp_path / "{symbol}.csv")
        assert len(loader.fetch_ohlcv("MSFT", "1m", 10)) == 1

    def test_missing_file(self, tmp_path):
        assert self._loader(tmp_path / "nope.csv").fetch_ohlcv("AAPL", "1d", 10) is None

    def test_missing_time_column(self, tmp_path):
        csv_file = tmp_path / "bars.csv"
        csv_file.write_text("open,high,low,close\n1,2,0.5,1\n", encoding="utf-8")
        assert self._loader(csv_file).fetch_ohlcv("AAPL", "1d", 10) is None

    def test_blank_numeric_time_returns_none(self, tmp_path):
        csv_file = tmp_path / "bars.csv"
        csv_file.write_text(
            "time,open,high,low,close,volume\n"
            "60,1,2,0.5,1.5,10\n"
            ",1,2,0.5,1.5,10\n",
            encoding="utf-8"
        )
        assert self._loader(csv_file).fetch_ohlcv("AAPL", "1d", 10) is None


class TestCacheSource:
    def test_round_trip(self, tmp_path):
        config = synthetic_config()
        config["cache"] = {"path": str(tmp_path / "cache")}
        loader = DataLoader(config)

        bars = loader.fetch_ohlcv("SYN", "1h", 20)
        assert loader.cache_data("SYN", "1h", bars)

        assert loader.switch_source("cache")
        assert loader.get_source() == "cache"
        assert loader.fetch_ohlcv("SYN", "1h", 5) == bars[-5:]

    def test_missing_cache_file(self, tmp_path):
        loader = DataLoader({"source": "cache", "cache": {"path": str(tmp_path)}})
        assert loader.fetch_ohlcv("SYN", "1h", 5) is None

    def test_switch_source_invalid(self):
        loader = DataLoader()
        assert loader.source == DataSource.SYNTHETIC
        assert not loader.switch_source("mt5")
        assert loader.get_source() == "synthetic"


class TestMemoryCache:
    def test_served_from_cache_until_expiry(self):
        now = [0.0]
        cache = BarCache(ttl_seconds=60, clock=lambda: now[0])
        loader = DataLoader(synthetic_config(), cache=cache)

        first = loader.fetch_ohlcv("SYN", "1h", 10)
        loader.synthetic_config["seed"] = 99
        assert loader.fetch_ohlcv("SYN", "1h", 10) == first
        assert loader.fetch_ohlcv("SYN", "1h", 3) == first[-3:]

        now[0] = 61
        assert loader.fetch_ohlcv("SYN", "1h", 10) != first

    def test_larger_request_refetches(self):
        cache = BarCache(ttl_seconds=60, clock=lambda: 0.0)
        loader = DataLoader(synthetic_config(), cache=cache)

        assert len(loader.fetch_ohlcv("SYN", "1h", 100)) == 100
        assert len(loader.fetch_ohlcv("SYN", "1h", 300)) == 300
        assert len(cache.get("SYN", "1h")) == 300

    def test_non_positive_count_is_empty(self, tmp_path):
        cache = BarCache(ttl_seconds=60, clock=lambda: 0.0)
        config = synthetic_config()
        config["cache"] = {"path": str(tmp_path)}
        loader = DataLoader(config, cache=cache)

        bars = loader.fetch_ohlcv("SYN", "1h", 10)
        loader.cache_data("SYN", "1h", bars)
        assert loader.fetch_ohlcv("SYN", "1h", 0) == []

        loader.switch_source("cache")
        cache.clear()
        assert loader.fetch_ohlcv("SYN", "1h", 0) == []
        assert loader.fetch_ohlcv("SYN", "1h", -5) == []
