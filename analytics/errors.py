"""
Analytics error types.

Only malformed input is an error. Not having enough bars for an indicator
or detector is signalled by an empty result, never by an exception.
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for all analytics errors."""


class ValidationError(AnalyticsError, ValueError):
    """Raw price data failed validation."""

    def __init__(self, reason: str, index: Optional[int] = None, field: Optional[str] = None):
        self.reason = reason
        self.index = index
        self.field = field
        super().__init__(self._format())

    def _format(self) -> str:
        location = []
        if self.index is not None:
            location.append(f"index={self.index}")
        if self.field is not None:
            location.append(f"field={self.field}")
        if location:
            return f"{self.reason} ({', '.join(location)})"
        return self.reason

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "reason": self.reason,
            "index": self.index,
            "field": self.field,
        }


class InvalidBarError(ValidationError):
    """A single bar violates the OHLCV invariants."""
