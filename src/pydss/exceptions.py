"""Custom exception hierarchy for pydss."""

from __future__ import annotations

from collections.abc import Iterable


class DssError(Exception):
    """Base exception for all pydss errors."""


class DssConfigError(DssError):
    """Invalid or missing configuration."""


class DssTransportError(DssError):
    """HTTP-level failure (network, non-200, invalid JSON, missing payload)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class DssIncompleteDataError(DssError):
    """One or more required telemetry series are empty.

    The dashboard keeps whatever it rendered last when this is raised;
    ``missing`` names the sources that came back empty.
    """

    def __init__(self, message: str, *, missing: Iterable[str] = ()) -> None:
        self.missing: tuple[str, ...] = tuple(missing)
        super().__init__(message)
