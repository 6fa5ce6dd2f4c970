from __future__ import annotations

import asyncio

import httpx
import pytest

from services.source import DecodeError, ProtocolError, TelemetryClient, TransportError

ENDPOINT = "http://sensors.test/readings"


def _fetch(handler) -> object:
    async def run() -> object:
        client = TelemetryClient(ENDPOINT, transport=httpx.MockTransport(handler))
        try:
            return await client.fetch()
        finally:
            await client.aclose()

    return asyncio.run(run())


def test_fetch_returns_decoded_json() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"timestamp": 1}])

    assert _fetch(handler) == [{"timestamp": 1}]
    assert seen[0].method == "GET"
    assert str(seen[0].url) == ENDPOINT


def test_non_success_status_raises_protocol_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(ProtocolError) as exc_info:
        _fetch(handler)

    assert exc_info.value.status_code == 503
    assert str(exc_info.value) == "HTTP error! status: 503"


def test_invalid_json_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(DecodeError):
        _fetch(handler)


def test_connection_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    with pytest.raises(TransportError) as exc_info:
        _fetch(handler)

    assert "Name or service not known" in str(exc_info.value)


def test_timeout_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        _fetch(handler)
