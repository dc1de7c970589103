"""Projection of one telemetry snapshot into dashboard view models.

Each chart keeps its own source's timestamps; sources are never resampled
onto a common clock. Rainfall and evapotranspiration are converted to the
display unit, irrigation and soil moisture are unit independent.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, tzinfo
from typing import TypeVar

from pydss import gauge, units
from pydss._constants import (
    DEFAULT_FC,
    DEFAULT_MAWD,
    DEFAULT_MAX_VALUE,
    UNCONFIGURED_MAX_VALUE,
)
from pydss.exceptions import DssIncompleteDataError
from pydss.models.telemetry import Reading, SoilThresholds, TelemetrySnapshot
from pydss.models.views import (
    ChartSlot,
    DashboardView,
    Depth,
    DisplayUnit,
    GaugeViewModel,
    LatestLabel,
    SeriesViewModel,
)

_logger = logging.getLogger(__name__)

TReading = TypeVar("TReading", bound=Reading)

IRRIGATION_SUFFIX = "h/h"
SOIL_MOISTURE_SUFFIX = "%"


def threshold_for(depth: Depth, thresholds: SoilThresholds | None) -> tuple[float, float, float]:
    """Return ``(mawd, fc, max_value)`` for *depth*.

    Without any thresholds source the gauge falls back to the default pair on
    the wide scale; with a source lacking this depth, to the default pair on
    the narrow scale.
    """
    if thresholds is None:
        return DEFAULT_MAWD, DEFAULT_FC, UNCONFIGURED_MAX_VALUE
    record = thresholds.for_depth(depth)
    if record is None:
        return DEFAULT_MAWD, DEFAULT_FC, DEFAULT_MAX_VALUE
    return record.mawd, record.fc, record.max_value or DEFAULT_MAX_VALUE


def build_series(
    readings: Iterable[TReading],
    value_of: Callable[[TReading], float | None],
    *,
    convert: Callable[[float], float] | None = None,
) -> SeriesViewModel:
    """Pair each reading's timestamp with its value, skipping missing values."""
    timestamps: list[datetime] = []
    values: list[float] = []
    for reading in readings:
        value = value_of(reading)
        if value is None:
            continue
        timestamps.append(reading.timestamp)
        values.append(convert(value) if convert is not None else value)
    return SeriesViewModel(timestamps=tuple(timestamps), values=tuple(values))


def format_time(timestamp: datetime, tz: tzinfo | None = None) -> str:
    """Local ``HH:MM`` of *timestamp* (host zone when *tz* is ``None``)."""
    return timestamp.astimezone(tz).strftime("%H:%M")


def latest_label(series: SeriesViewModel, suffix: str, tz: tzinfo | None = None) -> LatestLabel | None:
    if series.is_empty:
        return None
    return LatestLabel(time_text=format_time(series.timestamps[-1], tz), value=series.values[-1], suffix=suffix)


def project_gauges(
    snapshot: TelemetrySnapshot,
    thresholds: SoilThresholds | None,
) -> dict[Depth, GaugeViewModel]:
    latest = snapshot.latest_irrimeter
    if latest is None:
        return {}
    gauges: dict[Depth, GaugeViewModel] = {}
    for depth in Depth:
        value = latest.moisture(depth)
        if value is None:
            _logger.debug("No %s reading in latest irrimeter record; gauge skipped", depth.column)
            continue
        mawd, fc, max_value = threshold_for(depth, thresholds)
        gauges[depth] = gauge.compute(value, mawd, fc, max_value, label=depth.label)
    return gauges


def project(
    snapshot: TelemetrySnapshot,
    unit: DisplayUnit,
    depth: Depth,
    thresholds: SoilThresholds | None = None,
    *,
    tz: tzinfo | None = None,
) -> DashboardView:
    """Project *snapshot* for the given unit and depth selection.

    Parameters
    ----------
    snapshot : TelemetrySnapshot
        Snapshot to render; never modified.
    unit : DisplayUnit
        Display unit for rainfall and evapotranspiration.
    depth : Depth
        Depth shown in the soil moisture chart.
    thresholds : SoilThresholds or None
        Overrides the snapshot's own ``soil`` thresholds when given.
    tz : tzinfo or None
        Zone of the "latest point" labels; host local time when ``None``.

    Raises
    ------
    DssIncompleteDataError
        If any of the required time series is empty.
    """
    missing = snapshot.missing_sources
    if missing:
        raise DssIncompleteDataError(f"Incomplete data received: empty {', '.join(missing)}", missing=missing)

    unit = DisplayUnit(unit)
    depth = Depth(depth)
    if thresholds is None:
        thresholds = snapshot.soil

    def to_unit(value: float) -> float:
        return units.convert(value, unit)

    series = {
        ChartSlot.RAINFALL: build_series(snapshot.davis, lambda r: r.measured_rain_mm_h, convert=to_unit),
        ChartSlot.IRRIGATION: build_series(snapshot.campbell, lambda r: r.measurement),
        ChartSlot.EVAPOTRANSPIRATION: build_series(
            snapshot.davis, lambda r: r.potential_evapotranspiration_mm_h, convert=to_unit
        ),
        ChartSlot.SOIL_MOISTURE: build_series(snapshot.irrimeter, lambda r: r.moisture(depth)),
    }
    suffixes = {
        ChartSlot.RAINFALL: units.rate_suffix(unit),
        ChartSlot.IRRIGATION: IRRIGATION_SUFFIX,
        ChartSlot.EVAPOTRANSPIRATION: units.rate_suffix(unit),
        ChartSlot.SOIL_MOISTURE: SOIL_MOISTURE_SUFFIX,
    }
    latest: dict[ChartSlot, LatestLabel] = {}
    for slot, points in series.items():
        label = latest_label(points, suffixes[slot], tz)
        if label is not None:
            latest[slot] = label

    return DashboardView(
        unit=unit,
        depth=depth,
        gauges=project_gauges(snapshot, thresholds),
        series=series,
        latest=latest,
    )
