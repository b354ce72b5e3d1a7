"""
Color/intensity mapping.

Maps a normalized density in [0, 1] to an RGB(A) string and a level's
strength to its band colour.
"""

import logging
import math
from enum import Enum
from typing import Tuple, Union

from .models.levels import LevelKind
from .utils.numeric import format_number, js_round

logger = logging.getLogger(__name__)

# Level strength bands
STRONG_LEVEL_STRENGTH = 5
MEDIUM_LEVEL_STRENGTH = 3

LEVEL_COLORS = {
    'strong': {LevelKind.SUPPORT: '#22c55e', LevelKind.RESISTANCE: '#ef4444'},
    'medium': {LevelKind.SUPPORT: '#eab308', LevelKind.RESISTANCE: '#f97316'},
}
WEAK_LEVEL_COLOR = '#6b7280'


class ColorScheme(Enum):
    """Heatmap colour gradients."""
    BLUE_RED = "blue-red"
    GREEN_RED = "green-red"
    GRAYSCALE = "grayscale"


def as_color_scheme(scheme: Union[ColorScheme, str, None]) -> ColorScheme:
    """Resolve a scheme name; unknown names fall back to blue-red."""
    if isinstance(scheme, ColorScheme):
        return scheme
    try:
        return ColorScheme(scheme)
    except ValueError:
        logger.debug("unknown_color_scheme", extra={"scheme": scheme})
        return ColorScheme.BLUE_RED


def _clamp(intensity: float) -> float:
    if intensity is None or math.isnan(intensity):
        return 0.0
    return max(0.0, min(1.0, float(intensity)))


def _blue_red(intensity: float) -> Tuple[int, int, int]:
    if intensity < 0.5:
        # Blue to yellow
        t = intensity * 2
        return js_round(t * 255), js_round(t * 255), js_round(255 - t * 255)
    # Yellow to red
    t = (intensity - 0.5) * 2
    return 255, js_round(255 - t * 255), 0


def _green_red(intensity: float) -> Tuple[int, int, int]:
    return js_round(intensity * 255), js_round((1 - intensity) * 255), 0


def _grayscale(intensity: float) -> Tuple[int, int, int]:
    value = js_round(intensity * 255)
    return value, value, value


_SCHEMES = {
    ColorScheme.BLUE_RED: _blue_red,
    ColorScheme.GREEN_RED: _green_red,
    ColorScheme.GRAYSCALE: _grayscale,
}


def heatmap_rgb(intensity: float, scheme: Union[ColorScheme, str] = ColorScheme.BLUE_RED) -> Tuple[int, int, int]:
    """RGB channels for an intensity, clamped to [0, 1] first."""
    return _SCHEMES[as_color_scheme(scheme)](_clamp(intensity))


def get_heatmap_color(intensity: float, scheme: Union[ColorScheme, str] = ColorScheme.BLUE_RED) -> str:
    """
    Get heatmap color for an intensity.

    Args:
        intensity: Normalized density; clamped to [0, 1]
        scheme: Colour gradient (default blue-red)

    Returns:
        ``"rgb(r, g, b)"``
    """
    r, g, b = heatmap_rgb(intensity, scheme)
    return f"rgb({r}, {g}, {b})"


def get_heatmap_color_with_opacity(
    intensity: float,
    opacity: float,
    scheme: Union[ColorScheme, str] = ColorScheme.BLUE_RED
) -> str:
    """Same colour as get_heatmap_color with an alpha channel appended."""
    r, g, b = heatmap_rgb(intensity, scheme)
    return f"rgba({r}, {g}, {b}, {format_number(opacity)})"


def level_color(strength: int, kind: LevelKind) -> str:
    """Band colour for a level: strong (>=5), medium (>=3) or weak."""
    if strength >= STRONG_LEVEL_STRENGTH:
        return LEVEL_COLORS['strong'][kind]
    if strength >= MEDIUM_LEVEL_STRENGTH:
        return LEVEL_COLORS['medium'][kind]
    return WEAK_LEVEL_COLOR
