"""Dashboard wiring: user controls, page lifecycle and the cached snapshot."""

from __future__ import annotations

import logging
from enum import StrEnum

from pydss.client import DataSource
from pydss.config import DssConfig
from pydss.exceptions import DssIncompleteDataError, DssTransportError
from pydss.models.telemetry import SoilThresholds, TelemetrySnapshot
from pydss.models.views import DashboardView, Depth, DisplayUnit
from pydss.projector import project
from pydss.refresh import RefreshSession
from pydss.render import ChartSink, push_view

_logger = logging.getLogger(__name__)


class RefreshOutcome(StrEnum):
    """Result of one fetch-project-render pass."""

    UPDATED = "updated"
    INCOMPLETE = "incomplete"
    TRANSPORT_FAILURE = "transport_failure"
    NO_TOKEN = "no_token"


class DashboardController:
    """Owns the last good snapshot and the unit/depth selection.

    Unit and depth changes re-project the cached snapshot without fetching.
    Fetches happen only through :meth:`refresh`, normally driven by the
    :class:`RefreshSession` created in :meth:`load`.

    Parameters
    ----------
    source : DataSource
        Backend collaborator (usually a :class:`~pydss.client.DssClient`).
    sink : ChartSink
        Drawing target.
    config : DssConfig or None
        Initial unit/depth, cadence and label time zone.
    token : str or None
        Identity token; without one the dashboard stays blank.
    thresholds : SoilThresholds or None
        Overrides the thresholds carried by each snapshot.
    """

    def __init__(
        self,
        source: DataSource,
        sink: ChartSink,
        *,
        config: DssConfig | None = None,
        token: str | None = None,
        thresholds: SoilThresholds | None = None,
    ) -> None:
        self._config = config or DssConfig()
        self._source = source
        self._sink = sink
        self._token = token or None
        self._thresholds = thresholds
        self._tz = self._config.tzinfo()
        self._unit = self._config.unit
        self._depth = self._config.depth
        self._snapshot: TelemetrySnapshot | None = None
        self._view: DashboardView | None = None
        self._session: RefreshSession | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def unit(self) -> DisplayUnit:
        return self._unit

    @property
    def depth(self) -> Depth:
        return self._depth

    @property
    def snapshot(self) -> TelemetrySnapshot | None:
        """Last complete snapshot received."""
        return self._snapshot

    @property
    def view(self) -> DashboardView | None:
        """Last view pushed to the sink."""
        return self._view

    @property
    def session(self) -> RefreshSession | None:
        return self._session

    # ------------------------------------------------------------------
    # Page lifecycle
    # ------------------------------------------------------------------

    def load(self) -> bool:
        """Page load. Returns ``False`` (dashboard left blank) without a token."""
        if not self._token:
            _logger.warning("No auth token found; dashboard left blank")
            return False
        if self._session is None:
            self._session = RefreshSession(
                self.trigger,
                self.refresh,
                poll_interval=self._config.poll_interval,
                polls_per_cycle=self._config.polls_per_cycle,
            )
        return True

    def set_visible(self, visible: bool) -> None:
        """Page visibility change."""
        if self._session is None:
            _logger.debug("Visibility change ignored; no refresh session")
            return
        if visible:
            self._session.start()
        else:
            self._session.stop()

    async def close(self) -> None:
        """Page unload."""
        if self._session is not None:
            await self._session.close()

    # ------------------------------------------------------------------
    # Backend
    # ------------------------------------------------------------------

    async def trigger(self) -> None:
        """Fire the backend trigger side channel.

        Raises :class:`DssTransportError` on failure; the refresh session
        logs it and carries on polling.
        """
        if not self._token:
            return
        await self._source.trigger(self._token)

    async def refresh(self) -> RefreshOutcome:
        """Fetch a snapshot, cache it if complete, and render it."""
        if not self._token:
            return RefreshOutcome.NO_TOKEN
        try:
            snapshot = await self._source.fetch_snapshot(self._token)
        except DssTransportError as exc:
            _logger.error("Telemetry fetch failed: %s", exc)
            return RefreshOutcome.TRANSPORT_FAILURE
        if not snapshot.is_complete:
            _logger.warning("Incomplete data received: empty %s", ", ".join(snapshot.missing_sources))
            return RefreshOutcome.INCOMPLETE
        self._snapshot = snapshot
        self.render()
        return RefreshOutcome.UPDATED

    # ------------------------------------------------------------------
    # User controls
    # ------------------------------------------------------------------

    def toggle_unit(self) -> DisplayUnit:
        self.set_unit(self._unit.toggled())
        return self._unit

    def set_unit(self, unit: DisplayUnit | str) -> None:
        self._unit = DisplayUnit(unit)
        self.render()

    def set_depth(self, depth: Depth | int) -> None:
        self._depth = Depth(int(depth))
        self.render()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> DashboardView | None:
        """Project the cached snapshot and push it to the sink."""
        snapshot = self._snapshot
        if snapshot is None:
            return None
        try:
            view = project(snapshot, self._unit, self._depth, self._thresholds, tz=self._tz)
        except DssIncompleteDataError as exc:
            _logger.warning("Render skipped: %s", exc)
            return None
        push_view(self._sink, view)
        self._view = view
        return view
