"""Rendering seam between the dashboard and the chart drawing primitive."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from pydss.models.views import (
    SERIES_SLOTS,
    ChartSlot,
    DashboardView,
    DisplayUnit,
    GaugeViewModel,
    SeriesViewModel,
)

_logger = logging.getLogger(__name__)


class ChartSink(Protocol):
    """Opaque drawing target.

    ``render`` replaces whatever was previously drawn in *slot*.
    """

    def render(self, slot: ChartSlot, view_model: SeriesViewModel | GaugeViewModel) -> None:
        ...


@dataclass(frozen=True)
class SeriesStyle:
    """Line colour and tooltip wording for one time-series chart."""

    title: str
    line_color: str
    unit_dependent: bool = False
    tooltip_unit: str = "mm"

    def tooltip(self, value: float, unit: DisplayUnit = DisplayUnit.MM) -> str:
        suffix = DisplayUnit(unit).value if self.unit_dependent else self.tooltip_unit
        separator = "" if suffix == "%" else " "
        return f"{self.title}: {value:.2f}{separator}{suffix}"


SERIES_STYLE: dict[ChartSlot, SeriesStyle] = {
    ChartSlot.RAINFALL: SeriesStyle("Rainfall", "rgba(54, 162, 235, 0.8)", unit_dependent=True),
    ChartSlot.IRRIGATION: SeriesStyle("Irrigation", "rgba(75, 120, 192, 0.8)"),
    ChartSlot.EVAPOTRANSPIRATION: SeriesStyle(
        "Evapotranspiration", "rgba(255, 94, 86, 0.8)", unit_dependent=True
    ),
    ChartSlot.SOIL_MOISTURE: SeriesStyle("Soil Moisture", "rgba(102, 127, 255, 0.8)", tooltip_unit="%"),
}


def push_view(sink: ChartSink, view: DashboardView) -> list[ChartSlot]:
    """Render every gauge and non-empty series of *view* into *sink*.

    Returns the slots that were drawn. Empty series are skipped so the
    slot keeps its previous drawing.
    """
    drawn: list[ChartSlot] = []
    for depth, gauge_view in view.gauges.items():
        slot = ChartSlot.dial(depth)
        sink.render(slot, gauge_view)
        drawn.append(slot)
    for slot in SERIES_SLOTS:
        series = view.series.get(slot)
        if series is None or series.is_empty:
            _logger.debug("Skipping empty %s series", slot)
            continue
        sink.render(slot, series)
        drawn.append(slot)
    return drawn
