"""
Per-pollutant source-attribution model.

For a grid cell at a point in time, estimates a baseline concentration
for each pollutant and splits it across the named pollution sources
(construction, vehicle, dust) plus an unattributed residual ("other").

Source activity follows simple time-of-day / day-of-week patterns:

  - construction runs on weekday working hours, peaking mid-day;
  - vehicles peak in rush hours, drop on weekends and are denser near
    the coverage center;
  - dust rises with afternoon winds and doubles under dusty conditions.

Raw contributions are capped so the named sources never claim more than
CONTRIBUTION_CEILING_PCT of a pollutant; the rest is reported as "other".

All randomness is drawn from an explicit ``numpy.random.Generator`` so a
seeded generator reproduces results exactly.
"""

import numpy as np
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from config import (
    POLLUTANTS,
    PRIMARY_POLLUTANT,
    POLLUTANT_BASELINES,
    POLLUTANT_DECIMALS,
    SOURCES,
    RESIDUAL_SOURCE,
    SOURCE_BASE_RANGES,
    CONTRIBUTION_CEILING_PCT,
    CONTRIBUTION_DECIMALS,
    WORK_HOURS,
    PEAK_WORK_HOURS,
    CONSTRUCTION_WORK_FACTOR,
    CONSTRUCTION_PEAK_FACTOR,
    CONSTRUCTION_OFF_FACTOR,
    RUSH_HOURS,
    VEHICLE_RUSH_FACTOR,
    VEHICLE_WEEKEND_FACTOR,
    VEHICLE_PROXIMITY_FACTOR,
    VEHICLE_PROXIMITY_KM,
    DUST_HOURS,
    DUST_AFTERNOON_FACTOR,
    DUST_CONDITIONS_PROBABILITY,
    DUST_CONDITIONS_FACTOR,
    WEEKEND_DAYS,
    SOURCE_MODE_DERIVATIONS,
    OUTPUT_MODES,
)


@dataclass(frozen=True)
class ContributionResult:
    """Output of one model evaluation.

    Args:
        pollutant_values: Pollutant name -> estimated value.
        source_contributions: Pollutant name -> {source -> percentage},
            including the residual "other" share.
        dominant_source: Named source with the largest share of the
            primary pollutant.
        dusty: Whether dusty conditions were drawn (for the shared draw;
            per-pollutant draws report whether any pollutant was dusty).
    """

    pollutant_values: Dict[str, float]
    source_contributions: Dict[str, Dict[str, float]]
    dominant_source: str
    dusty: bool


# ---------------------------------------------------------------------------
# Time modulation
# ---------------------------------------------------------------------------

def is_weekend(timestamp: datetime) -> bool:
    return timestamp.weekday() in WEEKEND_DAYS


def construction_factor(hour: int, weekend: bool) -> float:
    """Construction activity multiplier for the given hour."""
    if weekend or not WORK_HOURS[0] <= hour <= WORK_HOURS[1]:
        return CONSTRUCTION_OFF_FACTOR
    if PEAK_WORK_HOURS[0] <= hour <= PEAK_WORK_HOURS[1]:
        return CONSTRUCTION_PEAK_FACTOR
    return CONSTRUCTION_WORK_FACTOR


def vehicle_factor(hour: int, weekend: bool, distance_km: float) -> float:
    """Traffic multiplier: rush hours, weekend dip, road density near center."""
    factor = VEHICLE_RUSH_FACTOR if hour in RUSH_HOURS else 1.0
    if weekend:
        factor *= VEHICLE_WEEKEND_FACTOR
    if distance_km < VEHICLE_PROXIMITY_KM:
        factor *= VEHICLE_PROXIMITY_FACTOR
    return factor


def dust_factor(hour: int, dusty: bool) -> float:
    """Dust multiplier: afternoon winds, doubled under dusty conditions."""
    factor = DUST_AFTERNOON_FACTOR if DUST_HOURS[0] <= hour <= DUST_HOURS[1] else 1.0
    if dusty:
        factor *= DUST_CONDITIONS_FACTOR
    return factor


def sample_dust_conditions(rng: np.random.Generator) -> bool:
    return bool(rng.random() < DUST_CONDITIONS_PROBABILITY)


def source_factors(
    timestamp: datetime,
    distance_km: float,
    dusty: bool,
) -> Dict[str, float]:
    """Return the activity multiplier of every source at *timestamp*."""
    hour = timestamp.hour
    weekend = is_weekend(timestamp)
    return {
        "construction": construction_factor(hour, weekend),
        "vehicle": vehicle_factor(hour, weekend, distance_km),
        "dust": dust_factor(hour, dusty),
    }


# ---------------------------------------------------------------------------
# Baselines and normalisation
# ---------------------------------------------------------------------------

def baseline_values(distance_km: float, rng: np.random.Generator) -> Dict[str, float]:
    """Distance-dependent pollutant baselines with symmetric jitter, rounded."""
    values = {}
    for pollutant in POLLUTANTS:
        params = POLLUTANT_BASELINES[pollutant]
        jitter = float(rng.uniform(-params["jitter"], params["jitter"]))
        value = max(0.0, params["base"] + distance_km * params["slope"] + jitter)
        values[pollutant] = round(value, POLLUTANT_DECIMALS[pollutant])
    return values


def raw_contributions(
    pollutant: str,
    factors: Dict[str, float],
    rng: np.random.Generator,
) -> Dict[str, float]:
    """Un-normalised source contributions for one pollutant."""
    ranges = SOURCE_BASE_RANGES[pollutant]
    raw = {}
    for source in SOURCES:
        low, spread = ranges[source]
        raw[source] = (low + float(rng.uniform(0.0, spread))) * factors[source]
    return raw


def normalize_contributions(
    raw: Dict[str, float],
    ceiling: float = CONTRIBUTION_CEILING_PCT,
    decimals: int = CONTRIBUTION_DECIMALS,
) -> Dict[str, float]:
    """
    Cap the named sources at *ceiling* percent and derive the residual.

    If the named sources sum above the ceiling they are scaled down
    proportionally so the sum equals the ceiling.  Values are rounded to
    *decimals*; any rounding overshoot is taken off the largest share so
    the rounded sum never exceeds the ceiling.

    Returns:
        {source -> percentage} for every named source plus "other".
    """
    total = sum(raw[s] for s in SOURCES)
    scale = ceiling / total if total > ceiling else 1.0

    shares = {s: round(raw[s] * scale, decimals) for s in SOURCES}
    excess = round(sum(shares.values()) - ceiling, decimals)
    if excess > 0:
        largest = max(SOURCES, key=lambda s: shares[s])
        shares[largest] = round(shares[largest] - excess, decimals)

    shares[RESIDUAL_SOURCE] = round(100.0 - sum(shares[s] for s in SOURCES), decimals)
    return shares


def dominant_source(contributions: Dict[str, float]) -> str:
    """Named source with the largest share; ties go to the earlier source."""
    return max(SOURCES, key=lambda s: contributions.get(s, 0.0))


# ---------------------------------------------------------------------------
# Model evaluation
# ---------------------------------------------------------------------------

def compute_contributions(
    cell,
    timestamp: datetime,
    rng: Optional[np.random.Generator] = None,
    shared_dust_conditions: bool = True,
) -> ContributionResult:
    """
    Evaluate baselines and source attribution for one cell at one instant.

    Only ``cell.distance_from_center`` is used.  Any timestamp is
    accepted; hour and weekday are read as-is from it.

    Args:
        cell: A GridCell (or any object exposing distance_from_center).
        timestamp: Instant to evaluate.
        rng: Random generator; a fresh unseeded one is used if omitted.
        shared_dust_conditions: Draw the dusty-conditions flag once and
            apply it to every pollutant.  When False each pollutant draws
            its own flag.

    Returns:
        ContributionResult.
    """
    if rng is None:
        rng = np.random.default_rng()

    distance_km = cell.distance_from_center / 1000.0
    values = baseline_values(distance_km, rng)

    dusty = sample_dust_conditions(rng) if shared_dust_conditions else False
    shared = source_factors(timestamp, distance_km, dusty)

    contributions = {}
    for pollutant in POLLUTANTS:
        factors = shared
        if not shared_dust_conditions:
            pollutant_dusty = sample_dust_conditions(rng)
            dusty = dusty or pollutant_dusty
            factors = source_factors(timestamp, distance_km, pollutant_dusty)
        raw = raw_contributions(pollutant, factors, rng)
        contributions[pollutant] = normalize_contributions(raw)

    return ContributionResult(
        pollutant_values=values,
        source_contributions=contributions,
        dominant_source=dominant_source(contributions[PRIMARY_POLLUTANT]),
        dusty=dusty,
    )


def percentage_of_aqi_view(result: ContributionResult) -> ContributionResult:
    """
    Project a result onto the percentage-of-AQI view.

    Keeps only the primary pollutant's attribution and derives the other
    pollutant values from its source percentages.
    """
    shares = result.source_contributions[PRIMARY_POLLUTANT]
    values = {PRIMARY_POLLUTANT: float(round(result.pollutant_values[PRIMARY_POLLUTANT]))}
    for pollutant, rule in SOURCE_MODE_DERIVATIONS.items():
        derived = rule["scale"] * sum(
            weight * shares[source] for source, weight in rule["weights"].items()
        )
        values[pollutant] = float(round(derived, rule["decimals"]))

    return ContributionResult(
        pollutant_values=values,
        source_contributions={PRIMARY_POLLUTANT: dict(shares)},
        dominant_source=result.dominant_source,
        dusty=result.dusty,
    )


def project(result: ContributionResult, mode: str) -> ContributionResult:
    """Select the output view: "pollutant" (as computed) or "source"."""
    if mode not in OUTPUT_MODES:
        raise ValueError(f"Unknown output mode '{mode}'. Use one of {OUTPUT_MODES}.")
    if mode == "source":
        return percentage_of_aqi_view(result)
    return result
