"""
Price series analytics engine.

Pure, deterministic signal extraction over OHLCV bars: indicators,
support/resistance levels and price-density heatmaps.
"""

__version__ = "1.0.0"
