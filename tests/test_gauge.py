from __future__ import annotations

import itertools

import pytest

from pydss.gauge import classify, compute, zone_bands
from pydss.models.views import GaugeColor


def test_dry_reading() -> None:
    gauge = compute(3, 5, 11, 15)

    assert gauge.color == GaugeColor.DRY
    assert gauge.scaled_value == pytest.approx(20.0)


def test_optimal_reading() -> None:
    assert compute(8, 5, 11, 15).color == GaugeColor.OPTIMAL


def test_saturated_reading() -> None:
    assert compute(13, 5, 11, 15).color == GaugeColor.SATURATED


def test_threshold_edges_are_optimal() -> None:
    assert classify(5, 5, 11) == GaugeColor.OPTIMAL
    assert classify(11, 5, 11) == GaugeColor.OPTIMAL


def test_zone_bands_follow_scaled_thresholds() -> None:
    gauge = compute(8, 5, 11, 20)

    low, mid, high = gauge.zone_boundaries
    assert low == pytest.approx(25.0)
    assert mid == pytest.approx(30.0)
    assert high == pytest.approx(45.0)


def test_colour_uses_raw_values_not_scaled_percentages() -> None:
    # Reading above the scale is clamped for drawing but still classified raw.
    gauge = compute(60, 5, 11, 40)

    assert gauge.scaled_value == 100.0
    assert gauge.color == GaugeColor.SATURATED


def test_scaled_value_clamped_at_zero() -> None:
    assert compute(-2, 5, 11, 15).scaled_value == 0.0


def test_inverted_thresholds_collapse_optimal_band() -> None:
    low, mid, high = zone_bands(60.0, 40.0)

    assert mid == 0.0
    assert low == pytest.approx(50.0)
    assert high == pytest.approx(50.0)
    assert low + mid + high == pytest.approx(100.0)


def test_zone_bands_always_non_negative_and_sum_to_100() -> None:
    max_value = 15.0
    grid = [0.0, 0.5, 3.0, 5.0, 7.5, 11.0, 14.9, 15.0]
    for value, mawd, fc in itertools.product(grid, repeat=3):
        bands = compute(value, mawd, fc, max_value).zone_boundaries
        assert sum(bands) == pytest.approx(100.0)
        assert all(band >= 0.0 for band in bands), (value, mawd, fc, bands)


def test_thresholds_beyond_scale_are_clamped() -> None:
    bands = compute(5, 5, 50, 40).zone_boundaries

    assert bands[2] == 0.0
    assert sum(bands) == pytest.approx(100.0)


def test_non_positive_scale_rejected() -> None:
    with pytest.raises(ValueError):
        compute(5, 5, 11, 0)


def test_display_text_rounds_half_up() -> None:
    assert compute(7.5, 5, 11, 15).display_text == "8%"
    assert compute(7.49, 5, 11, 15).display_text == "7%"


def test_colour_hex_palette() -> None:
    assert GaugeColor.DRY.hex == "#ff2e2e"
    assert GaugeColor.OPTIMAL.hex == "#077a4c"
    assert GaugeColor.SATURATED.hex == "#3399ff"
