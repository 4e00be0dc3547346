from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from downlinkctl.core.errors import ApplicationError, TransportError
from downlinkctl.transports.http import HttpDispatchClient

URL = "https://eu1.cloud.thethings.network/api/v3/as/applications/app/devices/dev/down/replace"
HEADERS = {"Authorization": "Bearer NNSXS.SECRET", "Content-Type": "application/json"}
BODY = {"downlinks": [{"frm_payload": "Chs=", "f_port": 1, "confirmed": False, "priority": "NORMAL"}]}


def _send(handler) -> object:
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await HttpDispatchClient(client=client).send(URL, HEADERS, BODY)

    return asyncio.run(_run())


def test_success_carries_status_code() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    result = _send(handler)
    assert result.ok
    assert result.status_code == 200
    assert seen[0].method == "POST"
    assert str(seen[0].url) == URL
    assert seen[0].headers["Authorization"] == "Bearer NNSXS.SECRET"
    assert json.loads(seen[0].content) == BODY


def test_non_2xx_is_application_error() -> None:
    result = _send(lambda request: httpx.Response(404, json={"message": "not found"}))
    assert not result.ok
    assert result.status_code == 404
    assert isinstance(result.error, ApplicationError)
    assert result.error.status_code == 404


def test_connection_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    calls = []
    result = _send(lambda request: calls.append(request) or handler(request))
    assert not result.ok
    assert result.status_code is None
    assert isinstance(result.error, TransportError)
    assert "Name or service not known" in str(result.error)
    assert len(calls) == 1


def test_header_encoding_failure_hides_header_bytes() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.LocalProtocolError("Illegal header value b'Bearer NNSXS.SECRET\\n'")

    result = _send(handler)
    assert isinstance(result.error, TransportError)
    assert result.status_code is None
    assert "NNSXS.SECRET" not in str(result.error)


def test_non_ascii_header_is_transport_error() -> None:
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200))) as client:
            return await HttpDispatchClient(client=client).send(
                URL, {"Authorization": "Bearer NNSXS.é"}, BODY
            )

    result = asyncio.run(_run())
    assert isinstance(result.error, TransportError)
    assert "NNSXS" not in str(result.error)


@pytest.mark.parametrize("url", ["nonsense/api/v3/as/applications/a/devices/d/down/push", "http://h:abc/down/push"])
def test_bad_server_url_is_transport_error(url: str) -> None:
    result = asyncio.run(HttpDispatchClient().send(url, HEADERS, BODY))
    assert not result.ok
    assert result.status_code is None
    assert isinstance(result.error, TransportError)
    assert "NNSXS.SECRET" not in str(result.error)
