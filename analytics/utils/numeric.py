"""Numeric utilities for consistent float handling."""

import math
from numbers import Real


def is_number(x) -> bool:
    """
    True for finite real numbers.

    Booleans are rejected even though ``bool`` subclasses ``int``; NaN and
    infinities are rejected because no OHLCV comparison holds for them.
    """
    if isinstance(x, bool) or not isinstance(x, Real):
        return False
    return math.isfinite(float(x))


def F(x) -> float:
    """
    Strict float conversion for ints/floats/Decimals.

    Single source of truth for numeric conversions of bar fields.

    Args:
        x: Value to convert

    Returns:
        float: Converted value

    Raises:
        TypeError: If the value is not a finite real number
    """
    if not is_number(x):
        raise TypeError(f"Unsupported numeric value: {x!r}")
    return float(x)


def js_round(x: float) -> int:
    """Round half up, matching browser colour channel rounding."""
    return int(math.floor(x + 0.5))


def format_number(x: float) -> str:
    """Shortest text form of a number (``1`` rather than ``1.0``)."""
    x = float(x)
    if x.is_integer():
        return str(int(x))
    return repr(x)
