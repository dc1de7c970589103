from __future__ import annotations

from typing import Any

import pytest

from pydss.models.telemetry import TelemetrySnapshot


def _payload() -> dict[str, Any]:
    return {
        "irrimeter": {
            "1h": [
                {
                    "timestamp": "2026-06-01T11:00:00Z",
                    "moisture_1": 3.0,
                    "moisture_2": 8.0,
                    "moisture_3": 13.0,
                    "moisture_4": "--",
                },
                {
                    "timestamp": "2026-06-01T10:00:00Z",
                    "moisture_1": 4.0,
                    "moisture_2": 9.0,
                    "moisture_3": 12.0,
                    "moisture_4": 7.5,
                },
            ]
        },
        "davis": {
            "1h": [
                {
                    "timestamp": "2026-06-01T10:00:00Z",
                    "measured_rain_mm_h": 2.0,
                    "potential_evapotranspiration_mm_h": 0.5,
                },
                {
                    "timestamp": "2026-06-01T11:00:00Z",
                    "measured_rain_mm_h": 4.0,
                    "potential_evapotranspiration_mm_h": 1.0,
                },
                {
                    "timestamp": "2026-06-01T11:30:00Z",
                    "measured_rain_mm_h": 10.0,
                    "potential_evapotranspiration_mm_h": None,
                },
            ]
        },
        "campbell": {
            "1h": [
                {"timestamp": "2026-06-01T10:15:00Z", "measurement": 0.0},
                {"timestamp": "2026-06-01T11:15:00Z", "measurement": 1.5},
            ]
        },
    }


@pytest.fixture
def payload() -> dict[str, Any]:
    return _payload()


@pytest.fixture
def snapshot(payload: dict[str, Any]) -> TelemetrySnapshot:
    return TelemetrySnapshot.from_payload(payload)
