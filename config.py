"""
Global configuration and constants for the Air-Quality Grid Generator.
"""

# --- Grid / Coverage Configuration ---
DEFAULT_CENTER = (28.6469, 77.3154)  # Anand Vihar, Delhi (lat, lng)
GRID_SIZE_M = 200                    # Cell edge length in meters
COVERAGE_RADIUS_KM = 2.5             # 5km diameter coverage
TIME_SERIES_HOURS = 72               # 3 days of hourly readings

# --- Geo Projection ---
EARTH_RADIUS_M = 6371000.0          # Spherical Earth radius
METERS_PER_DEGREE_APPROX = 111000.0  # Flat-earth scale used for the radius filter

# --- Pollutants ---
POLLUTANTS = ("aqi", "pm25", "pm10", "co", "no2", "so2")
PRIMARY_POLLUTANT = "aqi"
ENVIRONMENTAL_FIELDS = ("rh", "temperature", "wind_speed")

# Baseline model: value = base + distance_km * slope + uniform(-jitter, +jitter)
# Values rise away from the presumed clean core of the coverage area.
POLLUTANT_BASELINES = {
    "aqi":  {"base": 120.0, "slope": 15.0, "jitter": 20.0},
    "pm25": {"base": 60.0,  "slope": 8.0,  "jitter": 12.5},
    "pm10": {"base": 100.0, "slope": 12.0, "jitter": 17.5},
    "co":   {"base": 2.5,   "slope": 0.5,  "jitter": 1.0},
    "no2":  {"base": 45.0,  "slope": 6.0,  "jitter": 10.0},
    "so2":  {"base": 20.0,  "slope": 3.0,  "jitter": 7.5},
}

# Decimal places per pollutant (CO needs finer granularity)
POLLUTANT_DECIMALS = {
    "aqi": 1,
    "pm25": 1,
    "pm10": 1,
    "co": 2,
    "no2": 1,
    "so2": 1,
}

# --- Pollution Sources ---
# Canonical iteration order; also the tie-break order for the dominant source.
SOURCES = ("construction", "vehicle", "dust")
RESIDUAL_SOURCE = "other"

# Raw contribution = (low + uniform(0, spread)) * time factor
# Vehicle dominates CO/NO2, dust and construction dominate PM, SO2 is shared.
SOURCE_BASE_RANGES = {
    "aqi":  {"construction": (20.0, 35.0), "vehicle": (18.0, 30.0), "dust": (12.0, 25.0)},
    "pm25": {"construction": (15.0, 40.0), "vehicle": (10.0, 25.0), "dust": (20.0, 35.0)},
    "pm10": {"construction": (20.0, 50.0), "vehicle": (8.0, 20.0),  "dust": (25.0, 45.0)},
    "co":   {"construction": (5.0, 15.0),  "vehicle": (30.0, 40.0), "dust": (2.0, 8.0)},
    "no2":  {"construction": (8.0, 20.0),  "vehicle": (25.0, 35.0), "dust": (3.0, 10.0)},
    "so2":  {"construction": (15.0, 30.0), "vehicle": (10.0, 20.0), "dust": (5.0, 12.0)},
}

# Combined named-source share is capped; the remainder is unattributed "other".
CONTRIBUTION_CEILING_PCT = 85.0
CONTRIBUTION_DECIMALS = 1

# --- Time-of-Day Modulation ---
WORK_HOURS = (8, 18)               # Inclusive construction window (weekdays)
PEAK_WORK_HOURS = (10, 16)         # Inclusive peak construction window
CONSTRUCTION_WORK_FACTOR = 2.0
CONSTRUCTION_PEAK_FACTOR = 2.5
CONSTRUCTION_OFF_FACTOR = 0.3

RUSH_HOURS = frozenset({8, 9, 17, 18, 19, 20})
VEHICLE_RUSH_FACTOR = 2.2
VEHICLE_WEEKEND_FACTOR = 0.6
VEHICLE_PROXIMITY_FACTOR = 1.5     # Denser road network near the center
VEHICLE_PROXIMITY_KM = 1.0

DUST_HOURS = (12, 16)              # Inclusive afternoon wind window
DUST_AFTERNOON_FACTOR = 1.8
DUST_CONDITIONS_PROBABILITY = 0.3
DUST_CONDITIONS_FACTOR = 2.0

WEEKEND_DAYS = frozenset({5, 6})   # datetime.weekday(): Saturday, Sunday

# --- Percentage-of-AQI projection ---
# Derived pollutant value = scale * sum(weight * source percentage),
# rounded to whole units (CO to 2 decimals)
SOURCE_MODE_DERIVATIONS = {
    "pm25": {"scale": 0.8, "weights": {"construction": 1.8, "vehicle": 1.2, "dust": 2.5}, "decimals": 0},
    "pm10": {"scale": 0.9, "weights": {"construction": 2.5, "vehicle": 1.0, "dust": 4.0}, "decimals": 0},
    "co":   {"scale": 1.0, "weights": {"construction": 0.05, "vehicle": 0.15}, "decimals": 2},
    "no2":  {"scale": 0.7, "weights": {"construction": 0.8, "vehicle": 1.5}, "decimals": 0},
    "so2":  {"scale": 0.6, "weights": {"construction": 0.5, "vehicle": 0.3}, "decimals": 0},
}

# --- Environmental Readings ---
# uniform(low, low + spread)
HUMIDITY_RANGE_PCT = (35.0, 30.0)
TEMPERATURE_RANGE_C = (25.0, 15.0)
WIND_SPEED_RANGE_MPS = (2.0, 6.0)

# --- Map Filters ---
AIR_QUALITY_THRESHOLDS = {
    "aqi": (">=", 150.0),   # Unhealthy and above
    "pm25": (">=", 75.0),   # Elevated PM2.5
    "rh": ("<=", 45.0),     # Low humidity (dusty conditions)
    "co": (">=", 1.5),      # Elevated CO
}

# --- Output ---
OUTPUT_MODES = ("pollutant", "source")
DEFAULT_OUTPUT_MODE = "pollutant"
