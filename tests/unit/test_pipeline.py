import json
import unittest

import pytest

from analytics.errors import InvalidBarError, ValidationError
from analytics.indicators.engine import DEFAULT_INDICATORS
from analytics.models.config import Config
from analytics.orchestration.pipeline import AnalysisResult, AnalyticsPipeline
from infra.data.data_loader import DataLoader


def synthetic_bars(count=300, seed=7, trend=0.0):
    loader = DataLoader({
        "source": "synthetic",
        "synthetic": {"start_price": 100.0, "trend": trend, "volatility": 0.02, "seed": seed, "start_time": 1_700_000_000},
    })
    return loader.fetch_ohlcv("SYN", "1h", count)


class TestAnalyticsPipeline(unittest.TestCase):
    def setUp(self):
        self.pipeline = AnalyticsPipeline(Config())
        self.bars = synthetic_bars()

    def test_analyze(self):
        result = self.pipeline.analyze(self.bars, "SYN", "1h")

        self.assertIsInstance(result, AnalysisResult)
        self.assertEqual(result.ohlcv.length, 300)
        self.assertEqual(set(result.indicators), set(DEFAULT_INDICATORS))
        self.assertEqual(len(result.indicators['ema200']), 300 - 200 + 1)
        self.assertTrue(result.swing_points)
        self.assertTrue(result.heatmap.zones)
        self.assertEqual(result.config_hash, self.pipeline.config.config_hash.hash_value)

    def test_nearest_levels_bracket_last_close(self):
        result = self.pipeline.analyze(self.bars, "SYN", "1h")
        close = result.ohlcv.latest_bar.close

        self.assertEqual(result.metadata['reference_price'], close)
        if result.nearest_support is not None:
            self.assertLess(result.nearest_support.price, close)
            self.assertTrue(result.nearest_support.is_support)
        if result.nearest_resistance is not None:
            self.assertGreater(result.nearest_resistance.price, close)

    def test_reference_price_override(self):
        result = self.pipeline.analyze(self.bars, "SYN", "1h", reference_price=1_000_000.0)
        self.assertIsNone(result.nearest_resistance)

    def test_unsorted_input_matches_sorted(self):
        shuffled = list(reversed(self.bars))
        a = self.pipeline.analyze(self.bars, "SYN", "1h").to_dict()
        b = self.pipeline.analyze(shuffled, "SYN", "1h").to_dict()
        self.assertEqual(a, b)

    def test_to_dict_is_json(self):
        payload = json.loads(json.dumps(self.pipeline.analyze(self.bars, "SYN", "1h").to_dict()))
        self.assertEqual(payload['symbol'], "SYN")
        self.assertEqual(payload['bars'], 300)
        self.assertIn('rsi14', payload['indicators'])

    def test_invalid_series_propagates(self):
        bars = list(self.bars)
        bars[10] = dict(bars[10], high=bars[10]['low'] - 1)

        with self.assertRaises(InvalidBarError) as ctx:
            self.pipeline.analyze(bars, "SYN", "1h")
        self.assertEqual(ctx.exception.index, 10)
        self.assertEqual(self.pipeline.failures, 1)
        self.assertEqual(self.pipeline.runs, 0)

    def test_empty_series(self):
        result = self.pipeline.analyze([], "SYN", "1h")
        self.assertEqual(result.levels, ())
        self.assertEqual(result.heatmap.zones, ())
        self.assertTrue(all(points == [] for points in result.indicators.values()))
        self.assertIsNone(result.nearest_support)

    def test_summary(self):
        self.pipeline.analyze(self.bars, "SYN", "1h")
        summary = self.pipeline.get_summary()
        self.assertEqual(summary['runs'], 1)
        self.assertEqual(summary['detectors']['HeatmapGenerator']['seen'], 1)

    def test_disabled_level_detector(self):
        pipeline = AnalyticsPipeline(Config(level_configs={"enabled": False}))
        result = pipeline.analyze(self.bars, "SYN", "1h")

        self.assertEqual(result.levels, ())
        self.assertEqual(result.swing_points, ())
        self.assertIsNone(result.nearest_support)
        self.assertIsNone(result.nearest_resistance)
        self.assertTrue(result.heatmap.zones)
        self.assertEqual(pipeline.level_detector.stats.seen, 0)


class TestAnalyzeMany:
    def test_fan_out(self):
        pipeline = AnalyticsPipeline()
        series = {f"SYM{i}": synthetic_bars(count=120, seed=i) for i in range(4)}

        results = pipeline.analyze_many(series, "1h", max_workers=2)

        assert set(results) == set(series)
        assert pipeline.runs == 4
        for symbol, result in results.items():
            assert result.ohlcv.symbol == symbol
            assert result.to_dict() == pipeline.analyze(series[symbol], symbol, "1h").to_dict()

    def test_detector_stats_count_every_worker(self):
        pipeline = AnalyticsPipeline()
        series = {f"SYM{i}": synthetic_bars(count=120, seed=i) for i in range(8)}

        pipeline.analyze_many(series, "1h", max_workers=4)

        assert pipeline.level_detector.stats.seen == 8
        assert pipeline.heatmap_generator.stats.seen == 8

    def test_validation_error_raised(self):
        pipeline = AnalyticsPipeline()
        with pytest.raises(ValidationError):
            pipeline.analyze_many({"OK": synthetic_bars(50), "BAD": "not bars"}, "1h")


class TestDeterminism:
    def test_same_input_same_output(self):
        bars = synthetic_bars(seed=11, trend=0.05)
        first = AnalyticsPipeline(Config()).analyze(bars, "SYN", "1h").to_dict()
        second = AnalyticsPipeline(Config()).analyze(bars, "SYN", "1h").to_dict()
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)

    def test_configured_pipeline(self):
        config = Config(
            indicator_configs={'indicators': {'atr5': {'type': 'atr', 'period': 5}}},
            level_configs={'left_bars': 3, 'right_bars': 3, 'min_strength': 1},
            heatmap_configs={'target_zones': 10},
        )
        result = AnalyticsPipeline(config).analyze(synthetic_bars(100), "SYN", "1h")
        assert list(result.indicators) == ['atr5']
        assert len(result.heatmap.zones) in (10, 11)
        assert all(level.strength >= 1 for level in result.levels)
