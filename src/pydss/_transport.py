"""HTTP transport for the telemetry backend."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pydss._constants import AUTH_HEADER
from pydss._redact import redact_for_log
from pydss.config import DssConfig
from pydss.exceptions import DssTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the client.

    Lets tests pass doubles while keeping `HttpTransport` concrete.
    """

    async def request_json(self, method: str, endpoint: str, token: str) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp transport that authenticates every call with the ``auth-token`` header."""

    def __init__(self, config: DssConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request_json(self, method: str, endpoint: str, token: str) -> dict[str, Any]:
        """Send *method* to *endpoint* and return the decoded JSON object.

        Raises :class:`DssTransportError` on network failure, a non-200
        status, an undecodable body, or a body that is not a JSON object.
        An empty body decodes to ``{}``.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = {AUTH_HEADER: token, "accept": "application/json"}

        _logger.debug("%s %s headers=%s", method, url, redact_for_log(headers))

        try:
            async with self._http.request(method, url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise DssTransportError(
                        f"HTTP {resp.status} from {endpoint}: {resp.reason or text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except DssTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError, UnicodeDecodeError) as exc:
            raise DssTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return {}

        try:
            body = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DssTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body, dict):
            raise DssTransportError(
                f"Expected a JSON object from {endpoint}, got {type(body).__name__}",
                endpoint=endpoint,
            )
        return body
