"""HTTP client for the remote readings endpoint."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Base class for failures while retrieving a payload."""


class TransportError(FetchError):
    """The request could not complete (connectivity, DNS, timeout)."""


class ProtocolError(FetchError):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"HTTP error! status: {status_code}")
        self.status_code = status_code


class DecodeError(FetchError):
    """The response body is not valid JSON."""


class TelemetryClient:
    """Minimal async HTTP client for the readings endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = 4.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self) -> Any:
        """GET the endpoint and return the decoded JSON body."""
        try:
            response = await self._client.get(self.endpoint_url)
        except httpx.TransportError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise ProtocolError(response.status_code)

        try:
            return json.loads(response.text)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Invalid JSON response: {exc}") from exc
