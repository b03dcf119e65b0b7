from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import aiohttp
import pytest
from aiohttp import test_utils, web

from pyopenmap._transport import JsonpTransport, unwrap_jsonp
from pyopenmap.config import OpenMapSettings
from pyopenmap.controller import MapInstanceController
from pyopenmap.engine_loader import EngineLoader
from pyopenmap.exceptions import GeocodeError, GeocodeTransportError
from pyopenmap.geocoder import Geocoder
from pyopenmap.models.coordinate import PLACEHOLDER
from pyopenmap.models.map_config import MapConfig
from pyopenmap.models.surface import Container
from pyopenmap.state.instance import MapInstanceState, ResolutionStatus
from tests.fakes import FakeEngine


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("jsonp([43.6,-79.4]);", "[43.6,-79.4]"),
        ("  jsonp( [1, 2] )\n", "[1, 2]"),
        ("[1, 2]", "[1, 2]"),
        ("window.cb.done([1, 2])", "[1, 2]"),
    ],
)
def test_unwrap_jsonp(text: str, expected: str) -> None:
    assert unwrap_jsonp(text) == expected


async def _serve(handler: Callable[[web.Request], Awaitable[web.StreamResponse]]) -> test_utils.TestServer:
    app = web.Application()
    app.router.add_get("/create-api.php", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


@pytest.mark.asyncio
async def test_lookup_sends_query_and_callback() -> None:
    seen: dict[str, str] = {}

    async def handler(request: web.Request) -> web.Response:
        seen.update(request.query)
        return web.Response(text=f"{request.query['callback']}([48.856614,2.352222]);")

    server = await _serve(handler)
    try:
        settings = OpenMapSettings(geocoder_url=str(server.make_url("/create-api.php")), jsonp_callback="cb1")
        async with aiohttp.ClientSession() as session:
            payload = await JsonpTransport(settings, session).lookup("Paris, France")
    finally:
        await server.close()

    assert payload == [48.856614, 2.352222]
    assert seen == {"q": "Paris, France", "callback": "cb1"}


@pytest.mark.asyncio
async def test_non_200_is_a_transport_error() -> None:
    async def handler(request: web.Request) -> web.Response:
        return web.Response(status=503, text="busy")

    server = await _serve(handler)
    try:
        settings = OpenMapSettings(geocoder_url=str(server.make_url("/create-api.php")))
        async with aiohttp.ClientSession() as session:
            with pytest.raises(GeocodeTransportError) as exc_info:
                await JsonpTransport(settings, session).lookup("Paris")
    finally:
        await server.close()

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_garbage_body_is_a_geocode_error() -> None:
    async def handler(request: web.Request) -> web.Response:
        return web.Response(text="<html>not found</html>")

    server = await _serve(handler)
    try:
        settings = OpenMapSettings(geocoder_url=str(server.make_url("/create-api.php")))
        async with aiohttp.ClientSession() as session:
            with pytest.raises(GeocodeError, match="Invalid geocoder response"):
                await JsonpTransport(settings, session).lookup("Paris")
    finally:
        await server.close()


async def _undecodable(request: web.Request) -> web.Response:
    return web.Response(body=b"jsonp([\xff\xfe1, 2]);", content_type="text/javascript", charset="utf-8")


@pytest.mark.asyncio
async def test_undecodable_body_is_a_geocode_error() -> None:
    server = await _serve(_undecodable)
    try:
        settings = OpenMapSettings(geocoder_url=str(server.make_url("/create-api.php")))
        async with aiohttp.ClientSession() as session:
            with pytest.raises(GeocodeError, match="Undecodable geocoder response") as exc_info:
                await JsonpTransport(settings, session).lookup("Paris")
    finally:
        await server.close()

    assert exc_info.value.location == "Paris"
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


@pytest.mark.asyncio
async def test_undecodable_center_reply_marks_lookup_failed(engine: FakeEngine, loader: EngineLoader) -> None:
    server = await _serve(_undecodable)
    try:
        settings = OpenMapSettings(geocoder_url=str(server.make_url("/create-api.php")))
        async with aiohttp.ClientSession() as session:
            config = MapConfig.from_options({"start": 1, "end": 2, "target": "map", "location": "Paris"})
            state = MapInstanceState(
                instance_id="actualmap1",
                container=Container(target_id="map", element_id="actualmap1"),
            )
            controller = MapInstanceController(
                config,
                state,
                engine=engine,
                loader=loader,
                geocoder=Geocoder(JsonpTransport(settings, session)),
            )
            await controller.reveal()
            for _ in range(50):
                if state.center_status is not ResolutionStatus.PENDING:
                    break
                await asyncio.sleep(0.01)
    finally:
        await server.close()

    assert state.center_status is ResolutionStatus.FAILED
    assert state.center == PLACEHOLDER
