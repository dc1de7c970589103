"""Client and dashboard configuration for pydss."""

from __future__ import annotations

import dataclasses
import os
from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydss._constants import (
    BASE_URL,
    DATA_PATH,
    DEFAULT_RESOLUTION,
    POLL_INTERVAL_S,
    POLLS_PER_CYCLE,
    TRIGGER_PATH,
)
from pydss.exceptions import DssConfigError
from pydss.models.views import Depth, DisplayUnit


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise DssConfigError(f"{name} must be a number, got {value!r}") from exc


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise DssConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DssConfig:
    """Dashboard configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL (API gateway stage).
    data_path : str
        Path of the telemetry aggregation endpoint.
    trigger_path : str
        Path of the side channel that asks the backend to refresh its sources.
    resolution : str
        Key under which each time-series source nests its readings.
    poll_interval : float
        Seconds between two polls of one refresh cycle, measured from the
        end of the previous poll.
    polls_per_cycle : int
        Polls issued after each trigger before triggering again.
    request_timeout : float
        Total HTTP timeout in seconds.
    unit : DisplayUnit
        Initial display unit for rainfall and evapotranspiration.
    depth : Depth
        Initial soil moisture depth shown in the time-series chart.
    time_zone : str or None
        IANA zone used for "latest point" labels. ``None`` uses the host's
        local zone.
    """

    base_url: str = BASE_URL
    data_path: str = DATA_PATH
    trigger_path: str = TRIGGER_PATH
    resolution: str = DEFAULT_RESOLUTION
    poll_interval: float = POLL_INTERVAL_S
    polls_per_cycle: int = POLLS_PER_CYCLE
    request_timeout: float = 30.0
    unit: DisplayUnit = DisplayUnit.MM
    depth: Depth = Depth.D2
    time_zone: str | None = None

    def __post_init__(self) -> None:
        if self.poll_interval < 0:
            raise DssConfigError(f"poll_interval must be >= 0, got {self.poll_interval}")
        if self.polls_per_cycle < 1:
            raise DssConfigError(f"polls_per_cycle must be >= 1, got {self.polls_per_cycle}")
        try:
            object.__setattr__(self, "unit", DisplayUnit(self.unit))
        except ValueError as exc:
            raise DssConfigError(f"Unknown display unit {self.unit!r}") from exc
        try:
            object.__setattr__(self, "depth", Depth(int(self.depth)))
        except ValueError as exc:
            raise DssConfigError(f"Unknown soil depth selector {self.depth!r}") from exc
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def tzinfo(self) -> tzinfo | None:
        """Resolve ``time_zone``; ``None`` means host local time."""
        if not self.time_zone:
            return None
        try:
            return ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise DssConfigError(f"Unknown time zone {self.time_zone!r}") from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> DssConfig:
        """Create configuration from ``DSS_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "DSS_BASE_URL": "base_url",
            "DSS_DATA_PATH": "data_path",
            "DSS_TRIGGER_PATH": "trigger_path",
            "DSS_RESOLUTION": "resolution",
            "DSS_UNIT": "unit",
            "DSS_TIME_ZONE": "time_zone",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        interval_env = env.get("DSS_POLL_INTERVAL")
        if interval_env is not None:
            config_kwargs["poll_interval"] = _env_float("DSS_POLL_INTERVAL", interval_env)

        polls_env = env.get("DSS_POLLS_PER_CYCLE")
        if polls_env is not None:
            config_kwargs["polls_per_cycle"] = _env_int("DSS_POLLS_PER_CYCLE", polls_env)

        timeout_env = env.get("DSS_REQUEST_TIMEOUT")
        if timeout_env is not None:
            config_kwargs["request_timeout"] = _env_float("DSS_REQUEST_TIMEOUT", timeout_env)

        depth_env = env.get("DSS_DEPTH")
        if depth_env is not None:
            config_kwargs["depth"] = _env_int("DSS_DEPTH", depth_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
