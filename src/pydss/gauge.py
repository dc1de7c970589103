"""Soil moisture gauge computation.

A gauge is drawn as two concentric arcs: a background ring split into
dry / optimal / saturated bands at the MAWD and field-capacity thresholds,
and a foreground arc whose length is the reading. Everything is scaled to
percent of ``max_value`` for drawing, while the zone colour is decided on
the raw, unscaled values.
"""

from __future__ import annotations

from pydss.models.views import GaugeColor, GaugeViewModel


def _scale(value: float, max_value: float) -> float:
    return min(max(value / max_value * 100.0, 0.0), 100.0)


def zone_bands(scaled_mawd: float, scaled_fc: float) -> tuple[float, float, float]:
    """Split the 0-100 ring into (dry, optimal, saturated) band widths.

    Inputs are expected in 0..100. When the thresholds are inverted
    (``scaled_fc < scaled_mawd``) the optimal band collapses to zero and the
    dry/saturated boundary sits halfway between the two thresholds.
    """
    if scaled_fc >= scaled_mawd:
        return (scaled_mawd, scaled_fc - scaled_mawd, 100.0 - scaled_fc)
    boundary = (scaled_mawd + scaled_fc) / 2.0
    return (boundary, 0.0, 100.0 - boundary)


def classify(value: float, mawd: float, fc: float) -> GaugeColor:
    if value < mawd:
        return GaugeColor.DRY
    if value <= fc:
        return GaugeColor.OPTIMAL
    return GaugeColor.SATURATED


def compute(value: float, mawd: float, fc: float, max_value: float, *, label: str = "") -> GaugeViewModel:
    """Turn a raw reading and its thresholds into a gauge view model.

    Raises :class:`ValueError` if *max_value* is not positive.
    """
    if max_value <= 0:
        raise ValueError(f"max_value must be positive, got {max_value}")
    return GaugeViewModel(
        value=value,
        scaled_value=_scale(value, max_value),
        zone_boundaries=zone_bands(_scale(mawd, max_value), _scale(fc, max_value)),
        color=classify(value, mawd, fc),
        label=label,
    )
