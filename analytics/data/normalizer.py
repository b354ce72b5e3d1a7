"""
Price series validator and normalizer.

Every analysis starts here: raw bars are checked against the OHLCV
invariants, sorted by time and de-duplicated. A series containing a single
bad bar is rejected as a whole; the error names the offending index.
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence, Tuple

from ..errors import InvalidBarError, ValidationError
from ..models.ohlcv import Bar, OHLCV
from ..utils.numeric import F, is_number

logger = logging.getLogger(__name__)

BAR_FIELDS = ('time', 'open', 'high', 'low', 'close', 'volume')
PRICE_FIELDS = ('open', 'high', 'low', 'close', 'volume')

# Numeric timestamps above this are milliseconds
MILLISECONDS_THRESHOLD = 10_000_000_000


def _coerce_time(value: Any, index: Optional[int]) -> int:
    if not is_number(value):
        raise InvalidBarError("time must be numeric", index=index, field='time')
    if not float(value).is_integer():
        raise InvalidBarError("time must be whole seconds", index=index, field='time')
    return int(value)


def validate_bar(raw: Any, index: Optional[int] = None) -> Bar:
    """
    Validate a single raw bar.

    Args:
        raw: Mapping with time/open/high/low/close/volume keys, or a Bar
        index: Position of the bar in its series (for error reporting)

    Returns:
        Validated Bar

    Raises:
        InvalidBarError: If any field is missing, non-numeric or the OHLC
            relationship does not hold
    """
    if isinstance(raw, Bar):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        raise InvalidBarError("bar must be an object", index=index)

    for name in BAR_FIELDS:
        if name not in raw:
            raise InvalidBarError("missing field", index=index, field=name)

    values = {'time': _coerce_time(raw['time'], index)}
    for name in PRICE_FIELDS:
        value = raw[name]
        if not is_number(value):
            raise InvalidBarError("field must be numeric", index=index, field=name)
        values[name] = F(value)

    try:
        return Bar(**values)
    except InvalidBarError as e:
        raise InvalidBarError(e.reason, index=index, field=e.field) from None


def is_valid_bar(raw: Any) -> bool:
    """Boolean probe; never raises."""
    try:
        validate_bar(raw)
    except ValidationError:
        return False
    return True


def normalize_series(raw: Any) -> Tuple[Bar, ...]:
    """
    Validate, sort and de-duplicate a raw bar sequence.

    Bars are sorted ascending by time with a stable sort; when several bars
    share a timestamp the first one in sorted order survives.

    Args:
        raw: List or tuple of raw bars

    Returns:
        Tuple of Bars with strictly increasing time

    Raises:
        ValidationError: If the input is not a sequence
        InvalidBarError: If any bar is invalid
    """
    if isinstance(raw, OHLCV):
        raw = raw.bars
    if not isinstance(raw, (list, tuple)):
        raise ValidationError(f"series must be a list of bars, got {type(raw).__name__}")

    bars = [validate_bar(item, index) for index, item in enumerate(raw)]
    bars.sort(key=lambda b: b.time)

    unique = []
    last_time = None
    for bar in bars:
        if bar.time != last_time:
            unique.append(bar)
            last_time = bar.time

    dropped = len(bars) - len(unique)
    if dropped:
        logger.debug("duplicate_bars_dropped", extra={"dropped": dropped})

    return tuple(unique)


def normalize_ohlcv(symbol: str, timeframe: str, raw: Any) -> OHLCV:
    """Normalize raw bars into an OHLCV series."""
    bars = normalize_series(raw)
    logger.debug("series_normalized", extra={
        "symbol": symbol,
        "timeframe": timeframe,
        "bars": len(bars)
    })
    return OHLCV(symbol=symbol, bars=bars, timeframe=timeframe)


def normalize_timestamp(value: Any) -> int:
    """
    Convert a timestamp to Unix seconds.

    Numbers above 10^10 are taken as milliseconds and floored to seconds.
    Strings are parsed as ISO-8601; naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return math.floor(value.timestamp())
    if isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        return normalize_timestamp(datetime.fromisoformat(text))
    if is_number(value):
        if value > MILLISECONDS_THRESHOLD:
            return math.floor(value / 1000)
        return math.floor(value)
    raise TypeError(f"Unsupported timestamp: {value!r}")


def slice_by_time(bars: Iterable[Bar], start: int, end: int) -> Tuple[Bar, ...]:
    """Bars with start <= time <= end."""
    return tuple(b for b in bars if start <= b.time <= end)


def last_bars(bars: Sequence[Bar], count: int) -> Tuple[Bar, ...]:
    """Most recent ``count`` bars."""
    if count <= 0:
        return ()
    return tuple(bars[-count:])
