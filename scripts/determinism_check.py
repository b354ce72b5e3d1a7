#!/usr/bin/env python3
"""
Determinism Check - analyze the same series twice, verify a bit-for-bit match

Validates that the analytics are reproducible by:
1. Generating a seeded synthetic series
2. Running the pipeline on it with two independent pipeline instances
3. Comparing SHA-256 digests of the canonical JSON reports
4. Writing determinism_diff.json with the per-section digests
"""

import hashlib
import json
import logging
import sys
from pathlib import Path

from analytics.models.config import Config
from analytics.orchestration.pipeline import AnalyticsPipeline
from infra.data.data_loader import DataLoader
from infra.logging_config import setup_logging

logger = logging.getLogger(__name__)

SYNTHETIC_CONFIG = {
    "source": "synthetic",
    "synthetic": {"start_price": 100.0, "trend": 0.1, "volatility": 0.02, "seed": 7, "start_time": 1_700_000_000},
}


def canonical_digest(payload) -> str:
    """SHA-256 of the sorted, compact JSON encoding."""
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def section_digests(report: dict) -> dict:
    return {key: canonical_digest(value) for key, value in sorted(report.items())}


def run_determinism_test(bars_count: int = 300, symbol: str = "SYNTH", timeframe: str = "1h"):
    """
    Run the same series through two fresh pipelines.

    Returns:
        Tuple of (run1_report, run2_report)
    """
    logger.info(f"Starting determinism test with {bars_count} bars")
    bars = DataLoader(SYNTHETIC_CONFIG).fetch_ohlcv(symbol, timeframe, bars_count)

    reports = []
    for run in (1, 2):
        pipeline = AnalyticsPipeline(Config())
        result = pipeline.analyze(bars, symbol, timeframe)
        reports.append(result.to_dict())
        logger.info(f"Run {run}: {len(result.levels)} levels, {len(result.heatmap.zones)} zones")

    return reports[0], reports[1]


def compare_reports(report1: dict, report2: dict):
    """
    Compare two reports section by section.

    Returns:
        Tuple of (is_match, diff_report)
    """
    digests1 = section_digests(report1)
    digests2 = section_digests(report2)
    mismatches = [key for key in digests1 if digests1[key] != digests2.get(key)]

    diff_report = {
        "run1_digest": canonical_digest(report1),
        "run2_digest": canonical_digest(report2),
        "sections": {key: {"run1": digests1[key], "run2": digests2.get(key)} for key in digests1},
        "mismatches": mismatches,
    }
    diff_report["match"] = diff_report["run1_digest"] == diff_report["run2_digest"]
    return diff_report["match"], diff_report


def main():
    print("\n" + "=" * 70)
    print("DETERMINISM CHECK")
    print("=" * 70)

    log_file = setup_logging(name="determinism_check")
    logger.info(f"Logging to {log_file}")

    report1, report2 = run_determinism_test()
    is_match, diff_report = compare_reports(report1, report2)

    diff_file = Path("artifacts") / "determinism_diff.json"
    diff_file.parent.mkdir(parents=True, exist_ok=True)
    diff_file.write_text(json.dumps(diff_report, indent=2), encoding="utf-8")

    print(f"Run 1 digest: {diff_report['run1_digest']}")
    print(f"Run 2 digest: {diff_report['run2_digest']}")

    if is_match:
        print("\nOK: 100% determinism match")
        print(f"Diff report: {diff_file}")
        return 0

    print("\nFAIL: Determinism mismatch detected")
    print(f"Mismatched sections: {', '.join(diff_report['mismatches'])}")
    print(f"Diff report: {diff_file}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
