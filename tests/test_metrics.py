"""Tests for validation metrics and scenarios."""

import sys
import os
import pytest
import numpy as np
from dataclasses import replace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from validation.metrics import (
    dataset_statistics,
    source_statistics,
    check_dataset_invariants,
    sample_contributions,
    compare_contribution_means,
)
from validation.scenarios import (
    scenario_weekday_rush_hour,
    scenario_weekday_afternoon,
    scenario_weekend_afternoon,
    scenario_night,
    scenario_small_grid,
    scenario_default_coverage,
)
from data.dataset import GenerationConfig, GridDataset, generate_grid_dataset
from config import POLLUTANTS, SOURCES


class TestDatasetStatistics:
    def test_keys_and_counts(self, small_dataset):
        stats = dataset_statistics(small_dataset)
        for pollutant in POLLUTANTS:
            assert stats[pollutant]["count"] == 9
            assert stats[pollutant]["min"] <= stats[pollutant]["avg"] <= stats[pollutant]["max"]
        assert sum(stats["sources"].values()) == 9
        assert set(stats["sources"]) <= set(SOURCES)

    def test_empty_dataset(self):
        assert dataset_statistics(GridDataset(metadata={}, cells=())) == {}


class TestSourceStatistics:
    def test_per_source_summary(self, small_dataset):
        stats = source_statistics(small_dataset.cells, SOURCES)
        for source, summary in stats.items():
            assert source in SOURCES
            assert 0 < summary["min"] <= summary["max"] <= 85.0
            assert summary["unit"] == "% of AQI"

    def test_unknown_source_omitted(self, small_dataset):
        assert source_statistics(small_dataset.cells, ["industry"]) == {}


class TestInvariants:
    def test_generated_dataset_is_clean(self, small_dataset):
        assert check_dataset_invariants(small_dataset) == []

    def test_source_mode_dataset_is_clean(self):
        config = replace(scenario_small_grid(), output_mode="source", seed=3)
        assert check_dataset_invariants(generate_grid_dataset(config)) == []

    def test_detects_cell_outside_radius(self, small_dataset):
        meta = dict(small_dataset.metadata, radius_km=0.1)
        shrunk = replace(small_dataset, metadata=meta)
        problems = check_dataset_invariants(shrunk)
        assert any("outside radius" in p for p in problems)

    def test_detects_broken_series_step(self, small_dataset):
        cell = small_dataset.cells[0]
        series = (cell.time_series[0],) + cell.time_series[2:]
        broken = replace(small_dataset, cells=(replace(cell, time_series=series),))
        problems = check_dataset_invariants(broken)
        assert problems == ["grid_0: series step is not one hour"]

    def test_detects_residual_mismatch(self, small_dataset):
        cell = small_dataset.cells[0]
        shares = dict(cell.current.source_contributions)
        shares["aqi"] = dict(shares["aqi"], other=0.0)
        bad_point = replace(cell.current, source_contributions=shares)
        broken = replace(small_dataset, cells=(replace(cell, current=bad_point),))
        problems = check_dataset_invariants(broken)
        assert any("residual" in p for p in problems)


class TestSampling:
    def test_sample_shape_and_range(self):
        s = scenario_night()
        samples = sample_contributions(s["distance_m"], s["timestamp"], "vehicle", "co", n=50, seed=0)
        assert samples.shape == (50,)
        assert np.all((samples >= 0) & (samples <= 85.0))

    def test_seeded(self):
        s = scenario_night()
        a = sample_contributions(s["distance_m"], s["timestamp"], "dust", "pm10", n=20, seed=9)
        b = sample_contributions(s["distance_m"], s["timestamp"], "dust", "pm10", n=20, seed=9)
        np.testing.assert_array_equal(a, b)

    def test_invalid_n(self):
        s = scenario_night()
        with pytest.raises(ValueError):
            sample_contributions(s["distance_m"], s["timestamp"], "dust", "pm10", n=0)


class TestTimePatterns:
    """The source model's hour and weekday effects show up in samples."""

    def test_construction_idle_on_weekends(self):
        weekday, weekend = scenario_weekday_afternoon(), scenario_weekend_afternoon()
        a = sample_contributions(weekday["distance_m"], weekday["timestamp"], "construction", "pm10", seed=1)
        b = sample_contributions(weekend["distance_m"], weekend["timestamp"], "construction", "pm10", seed=2)
        result = compare_contribution_means(a, b)
        assert result["mean_diff"] > 0
        assert result["significant"]

    def test_vehicle_leads_construction_for_co_at_rush_hour(self):
        s = scenario_weekday_rush_hour()
        vehicle = sample_contributions(s["distance_m"], s["timestamp"], "vehicle", "co", seed=3)
        construction = sample_contributions(s["distance_m"], s["timestamp"], "construction", "co", seed=4)
        result = compare_contribution_means(vehicle, construction)
        assert result["mean_a"] > result["mean_b"]
        assert result["significant"]

    def test_dust_takes_over_when_construction_idle(self):
        weekend, weekday = scenario_weekend_afternoon(), scenario_weekday_afternoon()
        a = sample_contributions(weekend["distance_m"], weekend["timestamp"], "dust", "pm10", seed=5)
        b = sample_contributions(weekday["distance_m"], weekday["timestamp"], "dust", "pm10", seed=6)
        assert compare_contribution_means(a, b)["mean_diff"] > 0


class TestCompareMeans:
    def test_identical_samples_not_significant(self):
        a = [10.0, 12.0, 11.0, 13.0, 9.0]
        result = compare_contribution_means(a, list(a))
        assert result["mean_diff"] == 0.0
        assert not result["significant"]

    def test_too_few_observations(self):
        with pytest.raises(ValueError):
            compare_contribution_means([1.0], [1.0, 2.0])


class TestScenarios:
    def test_timing_scenarios_shape(self):
        for fn in (scenario_weekday_rush_hour, scenario_weekday_afternoon,
                   scenario_weekend_afternoon, scenario_night):
            s = fn()
            assert {"timestamp", "distance_m", "description"} <= set(s)
            assert s["timestamp"].tzinfo is not None
            assert 0 <= s["distance_m"] <= 2500

    def test_weekday_and_weekend(self):
        assert scenario_weekday_rush_hour()["timestamp"].weekday() == 1
        assert scenario_weekend_afternoon()["timestamp"].weekday() == 5

    def test_grid_scenarios(self):
        small = scenario_small_grid()
        assert isinstance(small, GenerationConfig)
        assert small.radius_km == 0.3
        assert small.time_series_hours == 24
        default = scenario_default_coverage()
        assert default.radius_km == 2.5
        assert default.time_series_hours == 72
