"""Millimetre to display-unit conversion."""

from __future__ import annotations

from pydss._constants import MM_TO_INCH
from pydss.models.views import DisplayUnit


def factor(unit: DisplayUnit) -> float:
    """Multiplier taking a millimetre value to *unit*."""
    return MM_TO_INCH if DisplayUnit(unit) is DisplayUnit.IN else 1.0


def convert(raw_mm: float, unit: DisplayUnit) -> float:
    return raw_mm * factor(unit)


def rate_suffix(unit: DisplayUnit) -> str:
    """Per-hour suffix for rainfall and evapotranspiration labels."""
    return f"{DisplayUnit(unit).value}/h"
