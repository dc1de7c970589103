"""pydss - Async live-refresh engine for an irrigation telemetry dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pydss")
except PackageNotFoundError:
    __version__ = "0+local"
from pydss.auth import token_from_url
from pydss.client import DataSource, DssClient
from pydss.config import DssConfig
from pydss.controller import DashboardController, RefreshOutcome
from pydss.exceptions import (
    DssConfigError,
    DssError,
    DssIncompleteDataError,
    DssTransportError,
)
from pydss.models import (
    ChartSlot,
    DashboardView,
    Depth,
    DepthThreshold,
    DisplayUnit,
    GaugeColor,
    GaugeViewModel,
    LatestLabel,
    SeriesViewModel,
    SoilThresholds,
    TelemetrySnapshot,
)
from pydss.refresh import RefreshSession
from pydss.render import SERIES_STYLE, ChartSink, SeriesStyle, push_view

__all__ = [
    "__version__",
    "ChartSink",
    "ChartSlot",
    "DashboardController",
    "DashboardView",
    "DataSource",
    "Depth",
    "DepthThreshold",
    "DisplayUnit",
    "DssClient",
    "DssConfig",
    "DssConfigError",
    "DssError",
    "DssIncompleteDataError",
    "DssTransportError",
    "GaugeColor",
    "GaugeViewModel",
    "LatestLabel",
    "RefreshOutcome",
    "RefreshSession",
    "SERIES_STYLE",
    "SeriesStyle",
    "SeriesViewModel",
    "SoilThresholds",
    "TelemetrySnapshot",
    "push_view",
    "token_from_url",
]
