"""Base model for backend telemetry records.

Every telemetry record model inherits from :class:`DssBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips backend sentinel
  values (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
* :data:`DssTimestamp`, an annotated type accepting ISO strings and
  epoch seconds or milliseconds.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from pydss.normalize import is_sentinel, parse_timestamp, safe_float


def _require_timestamp(value: Any) -> datetime:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"unparseable timestamp {value!r}")
    return parsed


def _optional_float(value: Any) -> float | None:
    return safe_float(value)


DssTimestamp = Annotated[datetime, BeforeValidator(_require_timestamp)]
"""Annotated type that coerces backend timestamps to aware UTC datetimes."""

OptionalFloat = Annotated[float | None, BeforeValidator(_optional_float)]
"""Annotated float that maps sentinels and garbage to ``None``."""


class DssBaseModel(BaseModel):
    """Base for backend telemetry records.

    Handles:
    * Backend sentinel values (``""``, ``"--"``, NaN) dropped so the
      field default is used instead
    * Stashes the original record in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original record as received."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if not is_sentinel(value)}
        # Keep an explicitly passed raw= (kwargs construction).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
