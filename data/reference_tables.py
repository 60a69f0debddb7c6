"""
Static legend and source reference tables.

Colour scales per pollutant, pollution-source descriptions and the
percentage-impact scales used for source overlays.  These are
configuration data shipped with every dataset; they are frozen so no
consumer can mutate them at runtime.
"""

from types import MappingProxyType


def _freeze(obj):
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(obj, dict):
        return MappingProxyType({k: _freeze(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(_freeze(v) for v in obj)
    return obj


def thaw(obj):
    """Return a plain, JSON-serialisable copy of a frozen table."""
    if isinstance(obj, MappingProxyType) or isinstance(obj, dict):
        return {k: thaw(v) for k, v in obj.items()}
    if isinstance(obj, tuple):
        return [thaw(v) for v in obj]
    return obj


def _range(lo, hi, color, label, opacity):
    return {"min": lo, "max": hi, "color": color, "label": label, "opacity": opacity}


POLLUTANT_COLOR_SCHEMES = _freeze({
    "aqi": {
        "name": "Air Quality Index",
        "unit": "AQI",
        "baseColor": "#666",
        "ranges": [
            _range(0, 50, "#00e400", "Good", 0.6),
            _range(51, 100, "#ffff00", "Moderate", 0.7),
            _range(101, 150, "#ff7e00", "Unhealthy for Sensitive", 0.8),
            _range(151, 200, "#ff0000", "Unhealthy", 0.8),
            _range(201, 300, "#8f3f97", "Very Unhealthy", 0.9),
            _range(301, 500, "#7e0023", "Hazardous", 1.0),
        ],
    },
    "pm25": {
        "name": "PM2.5",
        "unit": "µg/m³",
        "baseColor": "#3498db",
        "ranges": [
            _range(0, 12, "#85C1E9", "Good", 0.6),
            _range(13, 35, "#5DADE2", "Moderate", 0.7),
            _range(36, 55, "#3498DB", "Unhealthy for Sensitive", 0.8),
            _range(56, 150, "#2E86AB", "Unhealthy", 0.8),
            _range(151, 250, "#1B4F72", "Very Unhealthy", 0.9),
            _range(251, 500, "#0D2439", "Hazardous", 1.0),
        ],
    },
    "pm10": {
        "name": "PM10",
        "unit": "µg/m³",
        "baseColor": "#9b59b6",
        "ranges": [
            _range(0, 54, "#D7BDE2", "Good", 0.6),
            _range(55, 154, "#C39BD3", "Moderate", 0.7),
            _range(155, 254, "#A569BD", "Unhealthy for Sensitive", 0.8),
            _range(255, 354, "#8E44AD", "Unhealthy", 0.8),
            _range(355, 424, "#6C3483", "Very Unhealthy", 0.9),
            _range(425, 604, "#4A235A", "Hazardous", 1.0),
        ],
    },
    "co": {
        "name": "Carbon Monoxide",
        "unit": "ppm",
        "baseColor": "#e67e22",
        "ranges": [
            _range(0, 4.4, "#F8C471", "Good", 0.6),
            _range(4.5, 9.4, "#F5B041", "Moderate", 0.7),
            _range(9.5, 12.4, "#F39C12", "Unhealthy for Sensitive", 0.8),
            _range(12.5, 15.4, "#E67E22", "Unhealthy", 0.8),
            _range(15.5, 30.4, "#CA6F1E", "Very Unhealthy", 0.9),
            _range(30.5, 50.4, "#A04000", "Hazardous", 1.0),
        ],
    },
    "no2": {
        "name": "Nitrogen Dioxide",
        "unit": "µg/m³",
        "baseColor": "#27ae60",
        "ranges": [
            _range(0, 53, "#A9DFBF", "Good", 0.6),
            _range(54, 100, "#7DCEA0", "Moderate", 0.7),
            _range(101, 360, "#58D68D", "Unhealthy for Sensitive", 0.8),
            _range(361, 649, "#2ECC71", "Unhealthy", 0.8),
            _range(650, 1249, "#27AE60", "Very Unhealthy", 0.9),
            _range(1250, 2049, "#1E8449", "Hazardous", 1.0),
        ],
    },
    "so2": {
        "name": "Sulfur Dioxide",
        "unit": "µg/m³",
        "baseColor": "#e74c3c",
        "ranges": [
            _range(0, 35, "#F1948A", "Good", 0.6),
            _range(36, 75, "#EC7063", "Moderate", 0.7),
            _range(76, 185, "#E74C3C", "Unhealthy for Sensitive", 0.8),
            _range(186, 304, "#CB4335", "Unhealthy", 0.8),
            _range(305, 604, "#A93226", "Very Unhealthy", 0.9),
            _range(605, 1004, "#7B241C", "Hazardous", 1.0),
        ],
    },
})

POLLUTION_SOURCES = _freeze({
    "construction": {
        "name": "Construction",
        "icon": "🏗️",
        "color": "#8B4513",
        "description": "Construction activities, machinery, dust from building sites",
        "primaryPollutants": ["pm10", "pm25", "so2"],
        "secondaryPollutants": ["aqi", "no2"],
    },
    "vehicle": {
        "name": "Vehicle Emissions",
        "icon": "🚗",
        "color": "#DC143C",
        "description": "Vehicle exhaust, traffic congestion, road emissions",
        "primaryPollutants": ["co", "no2", "aqi"],
        "secondaryPollutants": ["pm25", "pm10"],
    },
    "dust": {
        "name": "Dust Sources",
        "icon": "🌪️",
        "color": "#DAA520",
        "description": "Natural dust, unpaved areas, wind-blown particles",
        "primaryPollutants": ["pm10", "pm25"],
        "secondaryPollutants": ["aqi"],
    },
})

_IMPACT_RANGES = [
    {"min": 0, "max": 10, "opacity": 0.2, "label": "Minimal Impact"},
    {"min": 11, "max": 25, "opacity": 0.4, "label": "Low Impact"},
    {"min": 26, "max": 40, "opacity": 0.6, "label": "Moderate Impact"},
    {"min": 41, "max": 60, "opacity": 0.7, "label": "High Impact"},
    {"min": 61, "max": 80, "opacity": 0.8, "label": "Very High Impact"},
    {"min": 81, "max": 100, "opacity": 0.9, "label": "Extreme Impact"},
]

SOURCE_COLOR_SCHEMES = _freeze({
    "construction": {
        "name": "Construction",
        "baseColor": "#8B4513",
        "color": "#D2691E",
        "description": "Construction activities, machinery, dust from building sites",
        "unit": "% of AQI",
        "ranges": _IMPACT_RANGES,
    },
    "vehicle": {
        "name": "Vehicle Emissions",
        "baseColor": "#DC143C",
        "color": "#B22222",
        "description": "Vehicle exhaust, traffic congestion, road dust",
        "unit": "% of AQI",
        "ranges": _IMPACT_RANGES,
    },
    "dust": {
        "name": "Dust Sources",
        "baseColor": "#DAA520",
        "color": "#B8860B",
        "description": "Natural dust, unpaved areas, wind-blown particles",
        "unit": "% of AQI",
        "ranges": _IMPACT_RANGES,
    },
})

UNKNOWN_COLOR = _freeze({"color": "#808080", "opacity": 0.5, "label": "Unknown"})
