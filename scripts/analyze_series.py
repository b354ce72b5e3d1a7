#!/usr/bin/env python3
"""
Analyze Series - load bars for one or more symbols and write the analysis report.

Usage:
    python scripts/analyze_series.py --symbol AAPL --timeframe 1d --bars 300
    python scripts/analyze_series.py --symbol AAPL --symbol MSFT --source csv --out artifacts/report.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from analytics.orchestration.pipeline import AnalyticsPipeline
from configs import ConfigLoader
from infra.data.cache import BarCache
from infra.data.data_loader import TIMEFRAME_SECONDS, DataLoader
from infra.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Price series analytics report")
    parser.add_argument("--symbol", action="append", required=True,
                        help="Symbol to analyze (repeatable)")
    parser.add_argument("--timeframe", default="1d", choices=sorted(TIMEFRAME_SECONDS),
                        help="Bar timeframe")
    parser.add_argument("--bars", type=int, default=300, help="Number of bars to load")
    parser.add_argument("--source", choices=["synthetic", "csv", "cache"],
                        help="Override the configured data source")
    parser.add_argument("--config-dir", type=str, help="Directory holding the JSON configs")
    parser.add_argument("--out", type=str, help="Write the JSON report here instead of stdout")
    parser.add_argument("--log-dir", type=str, default="logs", help="JSON log directory")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_dir, name="analyze_series", level=logging.WARNING)

    loader = ConfigLoader(args.config_dir)
    config = loader.build_config()

    ttl = config.data_configs.get("cache", {}).get("ttl_seconds", 300)
    data_loader = DataLoader(config.data_configs, cache=BarCache(ttl_seconds=ttl))
    if args.source:
        data_loader.switch_source(args.source)

    series = {}
    for symbol in args.symbol:
        bars = data_loader.fetch_ohlcv(symbol, args.timeframe, args.bars)
        if bars is None:
            print(f"No data for {symbol} ({data_loader.get_source()})", file=sys.stderr)
            return 1
        series[symbol] = bars

    pipeline = AnalyticsPipeline(config)
    results = pipeline.analyze_many(series, args.timeframe)

    report = {
        "config_hash": config.config_hash.hash_value,
        "results": {symbol: result.to_dict() for symbol, result in results.items()},
    }
    output = json.dumps(report, indent=2)

    if args.out:
        out_file = Path(args.out)
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(output, encoding="utf-8")
        logger.info("report_written", extra={"file": str(out_file), "symbols": len(results)})
        print(f"Report written to {out_file}")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
