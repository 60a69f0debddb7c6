"""
Validation metrics for generated grid datasets.

Summary statistics for legends and dashboards, structural invariant
checks, and statistical comparisons used to confirm that the source
model's time patterns come through in sampled contributions.
"""

import numpy as np
from datetime import datetime
from types import SimpleNamespace
from typing import Dict, Iterable, List, Optional
from scipy.stats import ttest_ind

from models.geo_projection import planar_distance_meters
from models.source_contribution import compute_contributions
from config import (
    POLLUTANTS,
    PRIMARY_POLLUTANT,
    SOURCES,
    RESIDUAL_SOURCE,
    CONTRIBUTION_CEILING_PCT,
)


# ---------------------------------------------------------------------------
# Summary statistics
# ---------------------------------------------------------------------------

def dataset_statistics(dataset) -> dict:
    """Per-pollutant min/max/avg/count over current readings.

    Returns:
        Dict keyed by pollutant, plus 'sources' mapping each dominant
        source to its cell count.  Empty dict for an empty dataset.
    """
    if not dataset.cells:
        return {}

    stats: Dict[str, dict] = {}
    for pollutant in POLLUTANTS:
        values = np.array([c.value(pollutant) for c in dataset.cells], dtype=float)
        stats[pollutant] = {
            "min": float(values.min()),
            "max": float(values.max()),
            "avg": round(float(values.mean()), 2),
            "count": int(values.size),
        }

    sources: Dict[str, int] = {}
    for cell in dataset.cells:
        key = cell.dominant_source or "unknown"
        sources[key] = sources.get(key, 0) + 1
    stats["sources"] = sources
    return stats


def source_statistics(
    cells: Iterable,
    sources: Iterable[str],
    pollutant: str = PRIMARY_POLLUTANT,
) -> dict:
    """Min/max/avg of each source's positive share across *cells*.

    Sources with no positive share anywhere are omitted.
    """
    cells = list(cells)
    stats = {}
    for source in sources:
        shares = np.array(
            [c.contribution(pollutant, source) for c in cells], dtype=float,
        )
        shares = shares[shares > 0]
        if shares.size == 0:
            continue
        stats[source] = {
            "min": round(float(shares.min()), 1),
            "max": round(float(shares.max()), 1),
            "avg": round(float(shares.mean()), 1),
            "count": int(shares.size),
            "unit": f"% of {pollutant.upper()}",
        }
    return stats


# ---------------------------------------------------------------------------
# Invariant checks
# ---------------------------------------------------------------------------

def _check_point(cell_id: str, point, tolerance: float) -> List[str]:
    problems = []
    for pollutant, shares in point.source_contributions.items():
        named = sum(shares[s] for s in SOURCES)
        if named > CONTRIBUTION_CEILING_PCT + tolerance:
            problems.append(
                f"{cell_id} {pollutant}: named share {named:.1f} exceeds ceiling"
            )
        if abs(shares[RESIDUAL_SOURCE] - (100.0 - named)) > 1e-6:
            problems.append(f"{cell_id} {pollutant}: residual does not close to 100")
        if any(shares[s] < 0 for s in SOURCES):
            problems.append(f"{cell_id} {pollutant}: negative share")
    return problems


def check_dataset_invariants(dataset, tolerance: float = 0.1) -> List[str]:
    """
    Verify containment, corner and contribution invariants.

    Args:
        dataset: GridDataset to inspect.
        tolerance: Allowed rounding slack on the contribution ceiling.

    Returns:
        List of human-readable violations (empty when all hold).
    """
    problems: List[str] = []
    meta = dataset.metadata
    center = meta["center"]
    radius_m = meta["radius_km"] * 1000.0

    for cell_data in dataset.cells:
        cell = cell_data.cell
        dist = planar_distance_meters(
            center["lat"], center["lng"], cell.center.lat, cell.center.lng,
        )
        if dist > radius_m + 1e-6:
            problems.append(f"{cell.id}: center {dist:.1f} m outside radius")

        if len(cell.corners) != 4:
            problems.append(f"{cell.id}: expected 4 corners, got {len(cell.corners)}")
        else:
            lats = [lat for lat, _ in cell.corners]
            lngs = [lng for _, lng in cell.corners]
            b = cell.bounds
            if (max(lats), min(lats), max(lngs), min(lngs)) != (b.north, b.south, b.east, b.west):
                problems.append(f"{cell.id}: corners do not match bounds")

        for point in (cell_data.current,) + cell_data.time_series:
            problems.extend(_check_point(cell.id, point, tolerance))

        stamps = [p.timestamp.timestamp() for p in cell_data.time_series]
        for earlier, later in zip(stamps, stamps[1:]):
            if later - earlier != 3600:
                problems.append(f"{cell.id}: series step is not one hour")
                break

    return problems


# ---------------------------------------------------------------------------
# Statistical comparisons
# ---------------------------------------------------------------------------

def sample_contributions(
    distance_m: float,
    timestamp: datetime,
    source: str,
    pollutant: str,
    n: int = 500,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Draw *n* independent contribution shares for one source/pollutant.

    Args:
        distance_m: Cell distance from the coverage center (meters).
        timestamp: Instant to evaluate.
        source: Source name (including "other").
        pollutant: Pollutant key.
        n: Sample size.
        seed: Seed for reproducibility.

    Returns:
        1-D array of percentages.
    """
    if n < 1:
        raise ValueError("n must be >= 1")

    probe = SimpleNamespace(distance_from_center=distance_m)
    rng = np.random.default_rng(seed)
    return np.array([
        compute_contributions(probe, timestamp, rng).source_contributions[pollutant][source]
        for _ in range(n)
    ])


def compare_contribution_means(
    sample_a: Iterable[float],
    sample_b: Iterable[float],
    alpha: float = 0.05,
) -> Dict[str, float]:
    """Welch's t-test between two contribution samples.

    Returns:
        Dict with keys: mean_a, mean_b, mean_diff, p_value, significant.

    Raises:
        ValueError: If either sample has fewer than 2 elements.
    """
    a = np.asarray(list(sample_a), dtype=float)
    b = np.asarray(list(sample_b), dtype=float)
    if len(a) < 2 or len(b) < 2:
        raise ValueError("Need at least 2 observations per sample")

    _, p_value = ttest_ind(a, b, equal_var=False)
    mean_a = float(np.mean(a))
    mean_b = float(np.mean(b))
    return {
        "mean_a": mean_a,
        "mean_b": mean_b,
        "mean_diff": mean_a - mean_b,
        "p_value": float(p_value),
        "significant": bool(p_value < alpha),
    }
