"""Data models for telemetry snapshots and dashboard view models."""

from pydss.models._base import DssBaseModel, DssTimestamp
from pydss.models.telemetry import (
    CampbellReading,
    DavisReading,
    DepthThreshold,
    IrrimeterReading,
    Reading,
    SoilThresholds,
    TelemetrySnapshot,
)
from pydss.models.views import (
    SERIES_SLOTS,
    ChartSlot,
    DashboardView,
    Depth,
    DisplayUnit,
    GaugeColor,
    GaugeViewModel,
    LatestLabel,
    SeriesViewModel,
)

__all__ = [
    "CampbellReading",
    "ChartSlot",
    "DashboardView",
    "DavisReading",
    "Depth",
    "DepthThreshold",
    "DisplayUnit",
    "DssBaseModel",
    "DssTimestamp",
    "GaugeColor",
    "GaugeViewModel",
    "IrrimeterReading",
    "LatestLabel",
    "Reading",
    "SERIES_SLOTS",
    "SeriesViewModel",
    "SoilThresholds",
    "TelemetrySnapshot",
]
