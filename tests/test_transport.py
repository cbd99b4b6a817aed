from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import test_utils, web
from conftest import make_config

from fleetroster._transport import HttpTransport, record_path
from fleetroster.config import RosterConfig, SourceEndpoint
from fleetroster.exceptions import SourceUnavailableError, WriteRejectedError
from fleetroster.models import EntityKind


class _Recorder:
    def __init__(self) -> None:
        self.requests: list[tuple[str, str, dict[str, str], Any]] = []


def _app(recorder: _Recorder) -> web.Application:
    async def handler(request: web.Request) -> web.StreamResponse:
        body = await request.text()
        headers = {key.lower(): value for key, value in request.headers.items()}
        recorder.requests.append((request.method, request.path, headers, json.loads(body) if body else None))
        name = request.match_info["name"]
        if name == "riders":
            return web.json_response({"data": [{"Roll No": "21CS001"}]})
        if name == "down":
            return web.Response(status=503, text="maintenance")
        if name == "garbled":
            return web.Response(text="<html>not json</html>")
        if name == "reject":
            return web.Response(status=422, text="missing Roll No")
        if name == "binary":
            return web.Response(status=201, body=b"\xff\xfe\xfa", content_type="application/json", charset="utf-8")
        return web.Response(text="")

    app = web.Application()
    app.router.add_route("*", "/{name}", handler)
    app.router.add_route("*", "/{name}/{tail:.*}", handler)
    return app


@pytest_asyncio.fixture
async def server() -> AsyncIterator[tuple[test_utils.TestServer, _Recorder]]:
    recorder = _Recorder()
    test_server = test_utils.TestServer(_app(recorder))
    await test_server.start_server()
    try:
        yield test_server, recorder
    finally:
        await test_server.close()


def _endpoint(server: test_utils.TestServer, name: str, entity: EntityKind = EntityKind.RIDER) -> SourceEndpoint:
    return SourceEndpoint(source_id=name, url=str(server.make_url(f"/{name}")), entity=entity)


def _config() -> RosterConfig:
    return make_config(api_token="secret-token", request_timeout=5.0)


def test_record_path_quotes_labels_and_keys() -> None:
    assert record_path("Roll No", "21CS 001") == "/Roll%20No/21CS%20001"
    assert record_path("Driver ID", "D/01") == "/Driver%20ID/D%2F01"


@pytest.mark.asyncio
async def test_get_json_sends_headers_and_decodes(server: tuple[test_utils.TestServer, _Recorder]) -> None:
    test_server, recorder = server
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        payload = await transport.get_json(_endpoint(test_server, "riders"))

    assert payload == {"data": [{"Roll No": "21CS001"}]}
    method, path, headers, _ = recorder.requests[0]
    assert (method, path) == ("GET", "/riders")
    assert headers["authorization"] == "Bearer secret-token"
    assert headers["accept"] == "application/json"


@pytest.mark.asyncio
@pytest.mark.parametrize(("name", "status"), [("down", 503), ("garbled", 200)])
async def test_get_json_failures_raise_source_unavailable(
    server: tuple[test_utils.TestServer, _Recorder], name: str, status: int
) -> None:
    test_server, _ = server
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        with pytest.raises(SourceUnavailableError) as excinfo:
            await transport.get_json(_endpoint(test_server, name))

    assert excinfo.value.source_id == name
    assert excinfo.value.status_code == status


@pytest.mark.asyncio
async def test_get_json_connection_error_raises_source_unavailable() -> None:
    endpoint = SourceEndpoint(source_id="nowhere", url="http://127.0.0.1:1/riders")
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        with pytest.raises(SourceUnavailableError, match="nowhere"):
            await transport.get_json(endpoint)


@pytest.mark.asyncio
async def test_post_and_patch_send_json_bodies(server: tuple[test_utils.TestServer, _Recorder]) -> None:
    test_server, recorder = server
    endpoint = _endpoint(test_server, "vehicles", EntityKind.VEHICLE)
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        created = await transport.post_json(endpoint, {"data": [{"Bus No": "B40"}]})
        updated = await transport.patch_json(endpoint, record_path("Bus No", "B40"), {"data": {"Status": "active"}})

    assert created == {}
    assert updated == {}
    assert recorder.requests[0][0] == "POST"
    assert recorder.requests[0][3] == {"data": [{"Bus No": "B40"}]}
    assert recorder.requests[1][:2] == ("PATCH", "/vehicles/Bus No/B40")
    assert recorder.requests[1][3] == {"data": {"Status": "active"}}


@pytest.mark.asyncio
async def test_rejected_write_raises(server: tuple[test_utils.TestServer, _Recorder]) -> None:
    test_server, _ = server
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        with pytest.raises(WriteRejectedError) as excinfo:
            await transport.post_json(_endpoint(test_server, "reject"), {"data": [{}]})

    assert excinfo.value.status_code == 422
    assert "missing Roll No" in str(excinfo.value)


@pytest.mark.asyncio
async def test_undecodable_acknowledgement_is_accepted(server: tuple[test_utils.TestServer, _Recorder]) -> None:
    test_server, _ = server
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        created = await transport.post_json(_endpoint(test_server, "binary"), {"data": [{"Roll No": "21CS001"}]})

    assert created == {}


@pytest.mark.asyncio
async def test_undecodable_read_raises_source_unavailable(server: tuple[test_utils.TestServer, _Recorder]) -> None:
    test_server, _ = server
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(_config(), session)
        with pytest.raises(SourceUnavailableError) as excinfo:
            await transport.get_json(_endpoint(test_server, "binary"))

    assert excinfo.value.status_code == 201


@pytest.mark.asyncio
async def test_trace_logs_mask_operator_contact(
    server: tuple[test_utils.TestServer, _Recorder], caplog: pytest.LogCaptureFixture
) -> None:
    test_server, recorder = server
    config = make_config(api_trace_enabled=True)
    body = {"data": [{"Driver ID": "D-09", "Contact": "98422 10101"}]}
    async with aiohttp.ClientSession() as session:
        transport = HttpTransport(config, session)
        with caplog.at_level(logging.DEBUG, logger="fleetroster"):
            await transport.post_json(_endpoint(test_server, "operators", EntityKind.OPERATOR), body)

    assert recorder.requests[0][3] == body
    assert "D-09" in caplog.text
    assert "98422" not in caplog.text
