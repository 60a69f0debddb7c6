"""
Overlay helpers for map layers and legends.

Lookups from pollutant values and source percentages to colours and
opacities, plus the threshold filter behind the map's air-quality
toggles.  Rendering itself happens in the UI; these functions only
translate dataset values into style attributes.
"""

import operator
from typing import Iterable, List, Optional

from data.reference_tables import (
    POLLUTANT_COLOR_SCHEMES,
    SOURCE_COLOR_SCHEMES,
    UNKNOWN_COLOR,
)
from config import AIR_QUALITY_THRESHOLDS

_COMPARATORS = {">=": operator.ge, "<=": operator.le}


def get_pollutant_color(pollutant: str, value: float) -> dict:
    """
    Colour band for a pollutant value.

    Args:
        pollutant: Pollutant key ('aqi', 'pm25', ...).
        value: Pollutant value.

    Returns:
        Dict with 'min', 'max', 'color', 'label', 'opacity'.  Values
        above every band map to the highest band at full opacity; an
        unknown pollutant yields a grey "Unknown" style.
    """
    scheme = POLLUTANT_COLOR_SCHEMES.get(pollutant)
    if scheme is None:
        return dict(UNKNOWN_COLOR)

    ranges = scheme["ranges"]
    # A band runs up to the next band's minimum, so values falling
    # between integer bands (e.g. 100.5) stay in the lower one
    for band, upper in zip(ranges, ranges[1:]):
        if value < upper["min"]:
            return dict(band)
    if value <= ranges[-1]["max"]:
        return dict(ranges[-1])

    highest = dict(ranges[-1])
    highest["opacity"] = 1.0
    return highest


def get_source_color_and_opacity(source: str, percent: float) -> dict:
    """Colour, opacity and impact label for a source's percentage share."""
    scheme = SOURCE_COLOR_SCHEMES.get(source)
    if scheme is None:
        return {"color": UNKNOWN_COLOR["color"], "opacity": 0.1, "label": UNKNOWN_COLOR["label"]}

    ranges = scheme["ranges"]
    band = ranges[-1]
    for candidate, upper in zip(ranges, ranges[1:]):
        if percent < upper["min"]:
            band = candidate
            break
    return {"color": scheme["color"], "opacity": band["opacity"], "label": band["label"]}


def combined_source_intensity(cell, sources: Iterable[str], pollutant: str) -> float:
    """
    Opacity (0-1) for the combined share of the selected sources.

    Unknown pollutants or sources contribute nothing.
    """
    total = sum(cell.contribution(pollutant, s) for s in sources)
    return min(total / 100.0, 1.0)


def apply_air_quality_thresholds(cells: List, active_filters: Optional[Iterable[str]]) -> List:
    """
    Keep only cells that meet every active threshold.

    Filters are keys of AIR_QUALITY_THRESHOLDS ('aqi', 'pm25', 'rh',
    'co'); unrecognised keys are ignored.  No filters keeps all cells.
    """
    active = [f for f in (active_filters or []) if f in AIR_QUALITY_THRESHOLDS]
    if not active:
        return list(cells)

    def meets(cell) -> bool:
        for key in active:
            op, limit = AIR_QUALITY_THRESHOLDS[key]
            value = cell.value(key)
            if value is None or not _COMPARATORS[op](value, limit):
                return False
        return True

    return [c for c in cells if meets(c)]
