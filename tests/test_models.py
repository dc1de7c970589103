from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import ValidationError

from pydss.models.telemetry import (
    CampbellReading,
    DavisReading,
    DepthThreshold,
    IrrimeterReading,
    SoilThresholds,
    TelemetrySnapshot,
)
from pydss.models.views import ChartSlot, Depth, SeriesViewModel
from pydss.normalize import parse_timestamp


def test_timestamp_formats() -> None:
    expected = datetime(2026, 6, 1, 10, 0, tzinfo=UTC)

    assert parse_timestamp("2026-06-01T10:00:00Z") == expected
    assert parse_timestamp("2026-06-01T12:00:00+02:00") == expected
    assert parse_timestamp("2026-06-01 10:00:00") == expected
    assert parse_timestamp(int(expected.timestamp())) == expected
    assert parse_timestamp(int(expected.timestamp() * 1000)) == expected
    assert parse_timestamp(str(int(expected.timestamp()))) == expected
    assert parse_timestamp("--") is None
    assert parse_timestamp("yesterday") is None


def test_reading_drops_sentinels_and_keeps_raw() -> None:
    reading = IrrimeterReading.model_validate(
        {"timestamp": "2026-06-01T10:00:00Z", "moisture_1": "--", "moisture_2": "7.25", "extra": 1}
    )

    assert reading.moisture_1 is None
    assert reading.moisture(Depth.D6) == 7.25
    assert reading.raw["extra"] == 1


def test_reading_requires_timestamp() -> None:
    with pytest.raises(ValidationError):
        CampbellReading.model_validate({"measurement": 1.0})


def test_snapshot_from_payload_sorts_and_unwraps_resolution(snapshot: TelemetrySnapshot) -> None:
    assert [r.timestamp.hour for r in snapshot.irrimeter] == [10, 11]
    assert len(snapshot.davis) == 3
    assert snapshot.davis[-1].potential_evapotranspiration_mm_h is None
    assert snapshot.soil is None
    assert snapshot.is_complete
    assert snapshot.latest_irrimeter is not None
    assert snapshot.latest_irrimeter.moisture(Depth.D2) == 3.0


def test_snapshot_accepts_bare_lists() -> None:
    snapshot = TelemetrySnapshot.from_payload(
        {"campbell": [{"timestamp": 1_780_000_000, "measurement": 2}]},
    )

    assert len(snapshot.campbell) == 1
    assert snapshot.missing_sources == ("irrimeter", "davis")
    assert not snapshot.is_complete


def test_snapshot_uses_requested_resolution() -> None:
    snapshot = TelemetrySnapshot.from_payload(
        {"davis": {"1h": [], "15m": [{"timestamp": "2026-06-01T10:15:00Z", "measured_rain_mm_h": 1}]}},
        resolution="15m",
    )

    assert len(snapshot.davis) == 1


def test_malformed_readings_are_dropped(payload: dict[str, Any]) -> None:
    payload["campbell"]["1h"].append({"measurement": 3.0})
    payload["campbell"]["1h"].append("garbage")

    snapshot = TelemetrySnapshot.from_payload(payload)

    assert len(snapshot.campbell) == 2


def test_empty_davis_makes_snapshot_incomplete(payload: dict[str, Any]) -> None:
    payload["davis"]["1h"] = []

    snapshot = TelemetrySnapshot.from_payload(payload)

    assert not snapshot.is_complete
    assert snapshot.missing_sources == ("davis",)


def test_soil_thresholds_from_list() -> None:
    thresholds = SoilThresholds.model_validate(
        [{"mawd": 4, "fc": 10}, {"mawd": 5, "fc": 12, "max_value": 20}, None, {"mawd": "--", "fc": 3}]
    )

    assert thresholds.for_depth(Depth.D2) == DepthThreshold(mawd=4, fc=10)
    d6 = thresholds.for_depth(Depth.D6)
    assert d6 is not None and d6.max_value == 20
    assert thresholds.for_depth(Depth.D10) is None
    assert thresholds.for_depth(Depth.D14) is None


@pytest.mark.parametrize("key", ["1", "moisture_1", "depth_1", "2in", '2"'])
def test_soil_thresholds_key_styles(key: str) -> None:
    thresholds = SoilThresholds.model_validate({key: {"mawd": 6, "fc": 9}})

    assert thresholds.for_depth(Depth.D2) == DepthThreshold(mawd=6, fc=9)


def test_soil_thresholds_pair_records_and_unknown_keys() -> None:
    thresholds = SoilThresholds.model_validate({"14in": [3, 8], "units": "%"})

    assert thresholds.for_depth(Depth.D14) == DepthThreshold(mawd=3, fc=8)
    assert thresholds.for_depth(Depth.D2) is None


def test_snapshot_with_empty_soil_source(payload: dict[str, Any]) -> None:
    payload["soil"] = {}

    snapshot = TelemetrySnapshot.from_payload(payload)

    assert snapshot.soil is not None
    assert snapshot.soil.is_empty


def test_snapshot_is_frozen(snapshot: TelemetrySnapshot) -> None:
    with pytest.raises(ValidationError):
        snapshot.davis = ()  # type: ignore[misc]


def test_series_lengths_must_match() -> None:
    with pytest.raises(ValidationError):
        SeriesViewModel(timestamps=(datetime(2026, 1, 1, tzinfo=UTC),), values=())


def test_davis_reading_numeric_strings() -> None:
    reading = DavisReading.model_validate(
        {"timestamp": "2026-06-01T10:00:00Z", "measured_rain_mm_h": "0.4", "potential_evapotranspiration_mm_h": "NaN"}
    )

    assert reading.measured_rain_mm_h == 0.4
    assert reading.potential_evapotranspiration_mm_h is None


def test_chart_slot_canvas_ids() -> None:
    assert ChartSlot.RAINFALL.canvas_id == "rainfallGraph"
    assert ChartSlot.SOIL_MOISTURE.canvas_id == "soilMoistureGraph"
    assert ChartSlot.EVAPOTRANSPIRATION.canvas_id == "evapotranspirationGraph"
    assert ChartSlot.dial(Depth.D10).canvas_id == "dial3"


def test_depth_labels() -> None:
    assert Depth.D2.label == '2" Soil Moisture'
    assert Depth.D14.column == "moisture_4"
