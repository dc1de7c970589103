"""Display enums and per-widget view models."""

from __future__ import annotations

import enum
import math
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DisplayUnit(StrEnum):
    """Display unit for rainfall and evapotranspiration."""

    MM = "mm"
    IN = "in"

    def toggled(self) -> DisplayUnit:
        return DisplayUnit.IN if self is DisplayUnit.MM else DisplayUnit.MM


class Depth(enum.IntEnum):
    """Fixed soil probe depths, valued by the depth selector (1-4)."""

    D2 = 1
    D6 = 2
    D10 = 3
    D14 = 4

    @property
    def inches(self) -> int:
        return {Depth.D2: 2, Depth.D6: 6, Depth.D10: 10, Depth.D14: 14}[self]

    @property
    def column(self) -> str:
        """Irrimeter column carrying this depth's moisture reading."""
        return f"moisture_{self.value}"

    @property
    def label(self) -> str:
        return f'{self.inches}" Soil Moisture'


class GaugeColor(StrEnum):
    """Moisture zone a raw reading falls into."""

    DRY = "dry"
    OPTIMAL = "optimal"
    SATURATED = "saturated"

    @property
    def hex(self) -> str:
        return {
            GaugeColor.DRY: "#ff2e2e",
            GaugeColor.OPTIMAL: "#077a4c",
            GaugeColor.SATURATED: "#3399ff",
        }[self]


class ChartSlot(StrEnum):
    """Named rendering slots on the dashboard."""

    RAINFALL = "rainfall"
    IRRIGATION = "irrigation"
    EVAPOTRANSPIRATION = "evapotranspiration"
    SOIL_MOISTURE = "soil_moisture"
    DIAL_1 = "dial_1"
    DIAL_2 = "dial_2"
    DIAL_3 = "dial_3"
    DIAL_4 = "dial_4"

    @classmethod
    def dial(cls, depth: Depth) -> ChartSlot:
        return cls(f"dial_{int(depth)}")

    @property
    def is_dial(self) -> bool:
        return self.value.startswith("dial_")

    @property
    def canvas_id(self) -> str:
        """Canvas element id used by the browser page for this slot."""
        if self.is_dial:
            return self.value.replace("_", "")
        head, _, tail = self.value.partition("_")
        return f"{head}{tail.capitalize()}Graph"


SERIES_SLOTS: tuple[ChartSlot, ...] = (
    ChartSlot.RAINFALL,
    ChartSlot.IRRIGATION,
    ChartSlot.EVAPOTRANSPIRATION,
    ChartSlot.SOIL_MOISTURE,
)


class GaugeViewModel(BaseModel):
    """Ring layout for one soil moisture dial.

    ``zone_boundaries`` are the (dry, optimal, saturated) band widths of the
    background ring in percent of the full arc; ``scaled_value`` is the
    length of the foreground arc.
    """

    model_config = ConfigDict(frozen=True)

    value: float
    scaled_value: float = Field(ge=0.0, le=100.0)
    zone_boundaries: tuple[float, float, float]
    color: GaugeColor
    label: str = ""

    @property
    def display_text(self) -> str:
        """Centre label, raw value rounded half-up."""
        return f"{math.floor(self.value + 0.5)}%"


class SeriesViewModel(BaseModel):
    """Points of one time-series chart, on its source's own clock."""

    model_config = ConfigDict(frozen=True)

    timestamps: tuple[datetime, ...] = ()
    values: tuple[float, ...] = ()

    @model_validator(mode="after")
    def _check_lengths(self) -> SeriesViewModel:
        if len(self.timestamps) != len(self.values):
            raise ValueError(
                f"series length mismatch: {len(self.timestamps)} timestamps, {len(self.values)} values"
            )
        return self

    @property
    def is_empty(self) -> bool:
        return not self.values

    def __len__(self) -> int:
        return len(self.values)


class LatestLabel(BaseModel):
    """Most recent point of a chart, formatted for display."""

    model_config = ConfigDict(frozen=True)

    time_text: str
    value: float
    suffix: str

    @property
    def text(self) -> str:
        return f"{self.time_text} {self.value:.2f} {self.suffix}"


class DashboardView(BaseModel):
    """Everything one snapshot projects to, for one unit/depth selection."""

    model_config = ConfigDict(frozen=True)

    unit: DisplayUnit
    depth: Depth
    gauges: dict[Depth, GaugeViewModel] = Field(default_factory=dict)
    series: dict[ChartSlot, SeriesViewModel] = Field(default_factory=dict)
    latest: dict[ChartSlot, LatestLabel] = Field(default_factory=dict)
