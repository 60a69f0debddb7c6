"""Tests for map overlay colour lookups and threshold filters."""

import sys
import os
import pytest
from types import SimpleNamespace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from visualization.overlays import (
    get_pollutant_color,
    get_source_color_and_opacity,
    combined_source_intensity,
    apply_air_quality_thresholds,
)
from data.reference_tables import (
    POLLUTANT_COLOR_SCHEMES,
    POLLUTION_SOURCES,
    SOURCE_COLOR_SCHEMES,
    thaw,
)


class _Cell(SimpleNamespace):
    """Minimal stand-in exposing value() and contribution()."""

    def value(self, name, default=None):
        return self.values.get(name, default)

    def contribution(self, pollutant, source):
        return self.shares.get(pollutant, {}).get(source, 0.0)


class TestPollutantColor:
    def test_aqi_bands(self):
        assert get_pollutant_color("aqi", 42)["label"] == "Good"
        assert get_pollutant_color("aqi", 175)["color"] == "#ff0000"
        assert get_pollutant_color("aqi", 150)["label"] == "Unhealthy for Sensitive"

    def test_co_decimal_band(self):
        band = get_pollutant_color("co", 5.2)
        assert band["label"] == "Moderate"
        assert band["opacity"] == 0.7

    def test_above_all_bands_is_highest_opaque(self):
        band = get_pollutant_color("aqi", 900)
        assert band["label"] == "Hazardous"
        assert band["opacity"] == 1.0

    def test_value_between_integer_bands_uses_lower_band(self):
        """Bands leave gaps (100-101); one-decimal values stay in the lower band."""
        band = get_pollutant_color("aqi", 100.5)
        assert band["label"] == "Moderate"
        assert band["opacity"] == 0.7
        assert get_pollutant_color("aqi", 50.5)["label"] == "Good"
        assert get_pollutant_color("pm25", 12.4)["label"] == "Good"

    def test_top_band_maximum_keeps_band_opacity(self):
        assert get_pollutant_color("aqi", 500)["opacity"] == 1.0
        assert get_pollutant_color("pm25", 500)["label"] == "Hazardous"

    def test_unknown_pollutant(self):
        band = get_pollutant_color("ozone", 10)
        assert band == {"color": "#808080", "opacity": 0.5, "label": "Unknown"}

    def test_result_is_a_copy(self):
        band = get_pollutant_color("pm25", 5)
        band["color"] = "#000000"
        assert POLLUTANT_COLOR_SCHEMES["pm25"]["ranges"][0]["color"] == "#85C1E9"


class TestSourceColor:
    def test_impact_bands(self):
        style = get_source_color_and_opacity("vehicle", 30)
        assert style == {"color": "#B22222", "opacity": 0.6, "label": "Moderate Impact"}

    def test_low_share(self):
        assert get_source_color_and_opacity("dust", 5)["label"] == "Minimal Impact"

    def test_share_between_impact_bands_uses_lower_band(self):
        assert get_source_color_and_opacity("vehicle", 10.5)["label"] == "Minimal Impact"
        assert get_source_color_and_opacity("vehicle", 40.7)["label"] == "Moderate Impact"
        assert get_source_color_and_opacity("dust", 85.0)["label"] == "Extreme Impact"

    def test_unknown_source(self):
        style = get_source_color_and_opacity("industry", 50)
        assert style["color"] == "#808080"
        assert style["opacity"] == 0.1


class TestCombinedIntensity:
    def test_sums_selected_sources(self):
        cell = _Cell(values={}, shares={"aqi": {"construction": 20.0, "vehicle": 30.0, "dust": 10.0}})
        assert combined_source_intensity(cell, ["construction", "vehicle"], "aqi") == pytest.approx(0.5)

    def test_capped_at_one(self):
        cell = _Cell(values={}, shares={"aqi": {"construction": 70.0, "vehicle": 60.0}})
        assert combined_source_intensity(cell, ["construction", "vehicle"], "aqi") == 1.0

    def test_unknown_keys_contribute_nothing(self):
        cell = _Cell(values={}, shares={"aqi": {"vehicle": 40.0}})
        assert combined_source_intensity(cell, ["industry"], "aqi") == 0.0
        assert combined_source_intensity(cell, ["vehicle"], "ozone") == 0.0

    def test_on_generated_cells(self, small_dataset):
        for cell in small_dataset.cells:
            intensity = combined_source_intensity(cell, ["construction", "vehicle", "dust"], "pm10")
            assert 0.0 <= intensity <= 0.85 + 1e-9


class TestThresholds:
    @pytest.fixture
    def cells(self):
        return [
            _Cell(id="a", values={"aqi": 180, "pm25": 90, "rh": 40, "co": 2.0}, shares={}),
            _Cell(id="b", values={"aqi": 150, "pm25": 60, "rh": 50, "co": 1.0}, shares={}),
            _Cell(id="c", values={"aqi": 90, "pm25": 80, "rh": 45, "co": 1.5}, shares={}),
        ]

    def test_no_filters_keeps_all(self, cells):
        assert apply_air_quality_thresholds(cells, []) == cells
        assert apply_air_quality_thresholds(cells, None) == cells

    def test_single_filter(self, cells):
        assert [c.id for c in apply_air_quality_thresholds(cells, ["aqi"])] == ["a", "b"]

    def test_at_most_filter(self, cells):
        assert [c.id for c in apply_air_quality_thresholds(cells, ["rh"])] == ["a", "c"]

    def test_filters_combine(self, cells):
        kept = apply_air_quality_thresholds(cells, ["pm25", "co"])
        assert [c.id for c in kept] == ["a", "c"]

    def test_unknown_filter_ignored(self, cells):
        assert apply_air_quality_thresholds(cells, ["ozone"]) == cells

    def test_works_on_dataset_cells(self, small_dataset):
        kept = apply_air_quality_thresholds(small_dataset.cells, ["rh"])
        assert len(kept) == 9  # stub humidity is 40 %


class TestReferenceTables:
    def test_all_pollutants_have_six_bands(self):
        for scheme in POLLUTANT_COLOR_SCHEMES.values():
            assert len(scheme["ranges"]) == 6

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            POLLUTANT_COLOR_SCHEMES["aqi"] = {}
        with pytest.raises(TypeError):
            SOURCE_COLOR_SCHEMES["dust"]["ranges"][0]["opacity"] = 1.0

    def test_thaw_gives_plain_copy(self):
        sources = thaw(POLLUTION_SOURCES)
        assert isinstance(sources, dict)
        assert sources["vehicle"]["primaryPollutants"] == ["co", "no2", "aqi"]
        sources["vehicle"]["name"] = "Cars"
        assert POLLUTION_SOURCES["vehicle"]["name"] == "Vehicle Emissions"
