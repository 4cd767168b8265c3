"""
Outbound writer tests against an httpx mock transport.
"""

import logging

import httpx
import pytest

from bobbycar_bridge.config import Settings
from bobbycar_bridge.exceptions import TransportError
from bobbycar_bridge.services import LineProtocolWriter

URL = "http://influx.test/api/v2/write?org=bobbycar&bucket=bobbycar&precision=ms"
PAYLOAD = "system,host=car1 uptime=1,freememory8=2 3\n"


def make_writer(handler) -> LineProtocolWriter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LineProtocolWriter(client, URL, "secret")


async def test_write_posts_payload_with_headers():
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        return httpx.Response(204)

    writer = make_writer(handler)
    response = await writer.write(PAYLOAD)
    await writer.aclose()

    assert response.status_code == 204
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["Authorization"] == "Token secret"
    assert request.headers["Content-Type"] == "text/plain; charset=utf-8"
    assert request.headers["Accept"] == "application/json"
    assert request.content == PAYLOAD.encode("utf-8")


async def test_error_status_raises_transport_error():
    writer = make_writer(lambda request: httpx.Response(401, text="unauthorized access"))

    with pytest.raises(TransportError) as exc:
        await writer.write(PAYLOAD)
    await writer.aclose()

    assert exc.value.status_code == 401
    assert exc.value.reason == "unauthorized access"
    assert str(exc.value) == "HTTP 401: unauthorized access"


async def test_network_error_raises_transport_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    writer = make_writer(handler)
    with pytest.raises(TransportError) as exc:
        await writer.write(PAYLOAD)
    await writer.aclose()

    assert exc.value.status_code is None
    assert "connection refused" in str(exc.value)


async def test_submit_logs_failures_instead_of_raising(caplog):
    writer = make_writer(lambda request: httpx.Response(500, text="boom"))

    with caplog.at_level(logging.WARNING):
        task = writer.submit(PAYLOAD, "car1")
        await task
    await writer.aclose()

    assert task.exception() is None
    assert "host=car1 request finished with error: HTTP 500: boom" in caplog.text


async def test_aclose_waits_for_dispatched_writes():
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        return httpx.Response(204)

    writer = make_writer(handler)
    writer.submit(PAYLOAD, "car1")
    writer.submit(PAYLOAD, "car2")
    assert writer.pending == 2

    await writer.aclose()

    assert len(requests) == 2
    assert writer.pending == 0


async def test_from_settings():
    writer = LineProtocolWriter.from_settings(Settings(url=URL, token="abc", write_timeout_seconds=2.5))

    assert writer.url == URL
    assert writer.headers["Authorization"] == "Token abc"
    assert writer.client.timeout.read == 2.5
    await writer.aclose()


async def test_invalid_url_raises_transport_error():
    writer = LineProtocolWriter(
        httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204))),
        "http://influx.test/api/v2/\x00write",
        "secret",
    )

    with pytest.raises(TransportError):
        await writer.write(PAYLOAD)
    await writer.aclose()


async def test_submit_logs_invalid_url(caplog):
    writer = LineProtocolWriter(
        httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204))),
        "http://influx.test/api/v2/\x00write",
        "secret",
    )

    with caplog.at_level(logging.WARNING):
        task = writer.submit(PAYLOAD, "car1")
        await task
    await writer.aclose()

    assert task.exception() is None
    assert "[WRITE] host=car1 request finished with error" in caplog.text
