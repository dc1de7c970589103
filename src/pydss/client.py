"""High-level async client for the telemetry aggregation backend."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from pydss._redact import redact_for_log
from pydss._transport import HttpTransport, Transport
from pydss.config import DssConfig
from pydss.exceptions import DssError, DssTransportError
from pydss.models.telemetry import TelemetrySnapshot

_logger = logging.getLogger(__name__)


class DataSource(Protocol):
    """What the dashboard needs from a backend."""

    async def fetch_snapshot(self, token: str) -> TelemetrySnapshot:
        ...

    async def trigger(self, token: str) -> None:
        ...


class DssClient:
    """Async client for the telemetry backend.

    Usage::

        async with DssClient(config) as client:
            snapshot = await client.fetch_snapshot(token)
    """

    def __init__(
        self,
        config: DssConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DssClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise DssError("Client not initialized. Use 'async with DssClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def fetch_snapshot(self, token: str) -> TelemetrySnapshot:
        """Pull the current telemetry snapshot.

        Raises
        ------
        DssTransportError
            On network failure, a non-200 status, or a body without a
            ``data`` object.
        """
        endpoint = self._config.data_path
        body = await self._require_transport().request_json("GET", endpoint, token)
        data = body.get("data")
        if not isinstance(data, dict):
            raise DssTransportError(f"Missing 'data' object from {endpoint}", endpoint=endpoint)
        snapshot = TelemetrySnapshot.from_payload(data, resolution=self._config.resolution)
        _logger.debug(
            "Fetched snapshot irrimeter=%d davis=%d campbell=%d soil=%s",
            len(snapshot.irrimeter),
            len(snapshot.davis),
            len(snapshot.campbell),
            snapshot.soil is not None,
        )
        return snapshot

    async def trigger(self, token: str) -> None:
        """Ask the backend to refresh its upstream sources."""
        body = await self._require_transport().request_json("POST", self._config.trigger_path, token)
        _logger.debug("Trigger accepted response=%s", redact_for_log(body))
