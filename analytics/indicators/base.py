"""
Shared indicator helpers.
"""

from typing import List, Sequence, Union

from ..models.ohlcv import Bar, PriceField


def as_price_field(field: Union[PriceField, str]) -> PriceField:
    """Accept either a PriceField or its string value."""
    if isinstance(field, PriceField):
        return field
    return PriceField(field)


def price_values(bars: Sequence[Bar], field: Union[PriceField, str] = PriceField.CLOSE) -> List[float]:
    """Extract one price field from every bar."""
    name = as_price_field(field).value
    return [getattr(b, name) for b in bars]


def validate_period(period, data_length: int) -> bool:
    """True if ``period`` is a positive int no longer than the data."""
    if isinstance(period, bool) or not isinstance(period, int):
        return False
    return 0 < period <= data_length


def typical_price(bar: Bar) -> float:
    """Calculate typical price (HLC/3)."""
    return bar.typical_price
