"""
Unit tests for analytics models.
"""

import json
import unittest
from datetime import datetime, timezone

from analytics.errors import InvalidBarError, ValidationError
from analytics.models.config import Config, ConfigHash
from analytics.models.heatmap import HeatmapData, PriceZone
from analytics.models.indicator import IndicatorPoint, MACDPoint
from analytics.models.levels import Level, LevelKind, SwingKind, SwingPoint
from analytics.models.ohlcv import Bar, OHLCV, PriceField


class TestBar(unittest.TestCase):
    """Test Bar model."""

    def test_bar_creation(self):
        bar = Bar(time=1_700_000_000, open=100.0, high=105.0, low=98.0, close=103.0, volume=1000.0)

        self.assertTrue(bar.is_bullish)
        self.assertFalse(bar.is_bearish)
        self.assertEqual(bar.body_size, 3.0)
        self.assertEqual(bar.range, 7.0)
        self.assertAlmostEqual(bar.typical_price, (105 + 98 + 103) / 3)
        self.assertEqual(bar.timestamp, datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))
        self.assertEqual(bar.price(PriceField.HIGH), 105.0)

    def test_bar_validation(self):
        with self.assertRaises(InvalidBarError):
            Bar(time=0, open=100.0, high=99.0, low=101.0, close=100.0, volume=0.0)

        with self.assertRaises(InvalidBarError) as ctx:
            Bar(time=0, open=100.0, high=101.0, low=99.0, close=102.0, volume=0.0)
        self.assertEqual(ctx.exception.field, 'high')

        with self.assertRaises(InvalidBarError) as ctx:
            Bar(time=0, open=100.0, high=101.0, low=99.0, close=100.0, volume=-1.0)
        self.assertEqual(ctx.exception.field, 'volume')

    def test_invalid_bar_is_value_error(self):
        with self.assertRaises(ValueError):
            Bar(time=0, open=100.0, high=100.0, low=100.5, close=100.0, volume=0.0)

    def test_doji_is_neither_bullish_nor_bearish(self):
        bar = Bar(time=0, open=10.0, high=11.0, low=9.0, close=10.0, volume=5.0)
        self.assertFalse(bar.is_bullish)
        self.assertFalse(bar.is_bearish)

    def test_bar_is_immutable(self):
        bar = Bar(time=0, open=10.0, high=11.0, low=9.0, close=10.0, volume=5.0)
        with self.assertRaises(AttributeError):
            bar.close = 12.0


class TestOHLCV(unittest.TestCase):
    """Test OHLCV model."""

    def setUp(self):
        self.bars = [
            Bar(time=60 * i, open=10.0 + i, high=11.0 + i, low=9.0 + i, close=10.5 + i, volume=100.0)
            for i in range(5)
        ]

    def test_ohlcv_creation(self):
        ohlcv = OHLCV(symbol='AAPL', bars=self.bars, timeframe='1m')

        self.assertIsInstance(ohlcv.bars, tuple)
        self.assertEqual(ohlcv.length, 5)
        self.assertEqual(ohlcv.latest_bar, self.bars[-1])

    def test_empty_series(self):
        ohlcv = OHLCV(symbol='AAPL', bars=(), timeframe='1m')
        self.assertIsNone(ohlcv.latest_bar)
        self.assertEqual(ohlcv.length, 0)

    def test_to_dict_is_json_serializable(self):
        ohlcv = OHLCV(symbol='AAPL', bars=self.bars, timeframe='1m')
        payload = json.loads(json.dumps(ohlcv.to_dict()))
        self.assertEqual(payload['symbol'], 'AAPL')
        self.assertEqual(payload['bars'][0]['time'], 0)


class TestIndicatorPoints:
    def test_point_to_dict(self):
        assert IndicatorPoint(time=5, value=1.5).to_dict() == {"time": 5, "value": 1.5}

    def test_macd_point_to_dict(self):
        point = MACDPoint(time=5, macd=1.0, signal=0.5, histogram=0.5)
        assert point.to_dict() == {"time": 5, "macd": 1.0, "signal": 0.5, "histogram": 0.5}


class TestLevelModels:
    def test_swing_point(self):
        swing = SwingPoint(time=10, price=101.0, kind=SwingKind.HIGH, index=3)
        assert swing.is_high
        assert swing.to_dict() == {"time": 10, "price": 101.0, "kind": "high", "index": 3}

    def test_level_coerces_timestamps(self):
        level = Level(price=100.0, kind=LevelKind.SUPPORT, strength=2, touch_timestamps=[1, 2])
        assert level.touch_timestamps == (1, 2)
        assert level.is_support
        assert not level.is_resistance
        assert level.to_dict()["kind"] == "support"


class TestHeatmapModels:
    def test_zone_contains_is_inclusive(self):
        zone = PriceZone(price_start=10.0, price_end=11.0)
        assert zone.contains(10.0)
        assert zone.contains(11.0)
        assert not zone.contains(11.01)
        assert zone.height == 1.0

    def test_heatmap_to_dict(self):
        heatmap = HeatmapData(zones=[PriceZone(1.0, 2.0, 3.0, 1.0)], max_density=3.0, min_density=3.0)
        assert isinstance(heatmap.zones, tuple)
        assert heatmap.to_dict()["zones"][0]["raw_density"] == 3.0


class TestConfig:
    def test_hash_is_deterministic(self):
        a = Config(level_configs={"tolerance": 0.5, "left_bars": 5})
        b = Config(level_configs={"left_bars": 5, "tolerance": 0.5})
        assert a.config_hash.hash_value == b.config_hash.hash_value

    def test_hash_changes_with_parameters(self):
        a = Config(level_configs={"tolerance": 0.5})
        b = Config(level_configs={"tolerance": 1.0})
        assert a.config_hash.hash_value != b.config_hash.hash_value

    def test_data_source_does_not_affect_hash(self):
        a = Config(data_configs={"source": "synthetic"})
        b = Config(data_configs={"source": "csv"})
        assert a.config_hash.hash_value == b.config_hash.hash_value

    def test_compute_is_sha256_hex(self):
        digest = ConfigHash.compute({"a": 1})
        assert len(digest) == 64


class TestErrors:
    def test_validation_error_message(self):
        error = ValidationError("missing field", index=3, field="close")
        assert str(error) == "missing field (index=3, field=close)"
        assert error.to_dict() == {
            "error": "ValidationError",
            "reason": "missing field",
            "index": 3,
            "field": "close",
        }

    def test_whole_input_error(self):
        error = ValidationError("series must be a list")
        assert str(error) == "series must be a list"
        assert error.index is None
