"""Telemetry snapshot and per-source reading models."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from pydss._constants import DEFAULT_RESOLUTION, THRESHOLDS_SOURCE, TIME_SERIES_SOURCES
from pydss.models._base import DssBaseModel, DssTimestamp, OptionalFloat
from pydss.models.views import Depth
from pydss.normalize import safe_float

_logger = logging.getLogger(__name__)

TReading = TypeVar("TReading", bound="Reading")


class Reading(DssBaseModel):
    """A dated record from one telemetry source."""

    timestamp: DssTimestamp


class IrrimeterReading(Reading):
    """Soil probe reading: moisture percentage at the four fixed depths."""

    moisture_1: OptionalFloat = None
    moisture_2: OptionalFloat = None
    moisture_3: OptionalFloat = None
    moisture_4: OptionalFloat = None

    def moisture(self, depth: Depth) -> float | None:
        value: float | None = getattr(self, depth.column)
        return value


class DavisReading(Reading):
    """Weather station reading, rates in millimetres per hour."""

    measured_rain_mm_h: OptionalFloat = None
    potential_evapotranspiration_mm_h: OptionalFloat = None


class CampbellReading(Reading):
    """Irrigation logger reading."""

    measurement: OptionalFloat = None


class DepthThreshold(BaseModel):
    """Management thresholds for one depth, in the raw reading's unit.

    Parameters
    ----------
    mawd : float
        Minimum allowable water depletion.
    fc : float
        Field capacity.
    max_value : float or None
        Full-scale value of the gauge. ``None`` uses the library default.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    mawd: float
    fc: float
    max_value: float | None = Field(default=None, gt=0)


def _depth_from_key(key: Any) -> Depth | None:
    """Map the assorted keys seen for a depth to a :class:`Depth`."""
    text = str(key).strip().lower()
    for prefix in ("moisture_", "depth_"):
        if text.startswith(prefix):
            text = text[len(prefix) :]
    if text.isdigit() and 1 <= int(text) <= len(Depth):
        return Depth(int(text))
    inches = text.rstrip('"').removesuffix("in").strip()
    for depth in Depth:
        if inches == str(depth.inches):
            return depth
    return None


def _threshold_record(value: Any) -> dict[str, Any] | None:
    if isinstance(value, DepthThreshold):
        return value.model_dump()
    if isinstance(value, Sequence) and not isinstance(value, str) and len(value) >= 2:
        value = {"mawd": value[0], "fc": value[1], "max_value": value[2] if len(value) > 2 else None}
    if not isinstance(value, Mapping):
        return None
    mawd = safe_float(value.get("mawd"))
    fc = safe_float(value.get("fc"))
    if mawd is None or fc is None:
        return None
    max_value = safe_float(value.get("max_value", value.get("max")))
    return {"mawd": mawd, "fc": fc, "max_value": max_value if max_value and max_value > 0 else None}


class SoilThresholds(BaseModel):
    """Per-depth thresholds from the ``soil`` source.

    Accepts a list of four records (2", 6", 10", 14" in order) or a mapping
    keyed by selector value (``"1"``), column (``"moisture_1"``) or depth
    (``"2in"``). Records lacking ``mawd`` or ``fc`` are treated as absent.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    depth_1: DepthThreshold | None = None
    depth_2: DepthThreshold | None = None
    depth_3: DepthThreshold | None = None
    depth_4: DepthThreshold | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalise_layout(cls, values: Any) -> Any:
        items: list[tuple[Depth | None, Any]]
        if isinstance(values, Mapping):
            items = [(_depth_from_key(k), v) for k, v in values.items()]
        elif isinstance(values, Sequence) and not isinstance(values, str):
            items = [(depth, record) for depth, record in zip(Depth, values, strict=False)]
        else:
            return values

        normalised: dict[str, Any] = {}
        for depth, record in items:
            if depth is None:
                continue
            parsed = _threshold_record(record)
            if parsed is not None:
                normalised[f"depth_{int(depth)}"] = parsed
        return normalised

    def for_depth(self, depth: Depth) -> DepthThreshold | None:
        record: DepthThreshold | None = getattr(self, f"depth_{int(depth)}")
        return record

    @property
    def is_empty(self) -> bool:
        return all(self.for_depth(depth) is None for depth in Depth)


def _source_records(data: Mapping[str, Any], name: str, resolution: str) -> list[Any]:
    value = data.get(name)
    if isinstance(value, Mapping):
        value = value.get(resolution)
    if isinstance(value, list):
        return value
    return []


def _parse_readings(records: list[Any], model: type[TReading], source: str) -> tuple[TReading, ...]:
    readings: list[TReading] = []
    for record in records:
        try:
            readings.append(model.model_validate(record))
        except ValidationError:
            _logger.debug("Dropping malformed %s record %r", source, record, exc_info=True)
    readings.sort(key=lambda reading: reading.timestamp)
    return tuple(readings)


class TelemetrySnapshot(BaseModel):
    """One complete pull of all telemetry sources.

    Immutable and replaced wholesale on every successful fetch.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    irrimeter: tuple[IrrimeterReading, ...] = ()
    davis: tuple[DavisReading, ...] = ()
    campbell: tuple[CampbellReading, ...] = ()
    soil: SoilThresholds | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], *, resolution: str = DEFAULT_RESOLUTION) -> TelemetrySnapshot:
        """Build a snapshot from the backend's ``data`` object.

        Time-series sources nest their readings under ``resolution``
        (``{"davis": {"1h": [...]}}``); a bare list is accepted too.
        Unparseable readings are dropped and the rest sorted by time.
        """
        soil_raw = data.get(THRESHOLDS_SOURCE)
        soil: SoilThresholds | None = None
        if isinstance(soil_raw, (Mapping, list)):
            try:
                soil = SoilThresholds.model_validate(soil_raw)
            except ValidationError:
                _logger.debug("Ignoring malformed soil thresholds %r", soil_raw, exc_info=True)
                soil = SoilThresholds()

        return cls(
            irrimeter=_parse_readings(_source_records(data, "irrimeter", resolution), IrrimeterReading, "irrimeter"),
            davis=_parse_readings(_source_records(data, "davis", resolution), DavisReading, "davis"),
            campbell=_parse_readings(_source_records(data, "campbell", resolution), CampbellReading, "campbell"),
            soil=soil,
        )

    @property
    def missing_sources(self) -> tuple[str, ...]:
        """Time-series sources that came back empty."""
        return tuple(name for name in TIME_SERIES_SOURCES if not getattr(self, name))

    @property
    def is_complete(self) -> bool:
        return not self.missing_sources

    @property
    def latest_irrimeter(self) -> IrrimeterReading | None:
        return self.irrimeter[-1] if self.irrimeter else None
