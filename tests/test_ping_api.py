import asyncio
import json

from aiohttp.test_utils import make_mocked_request

from pingtrack.server.ping_api import create_app, handle_ping

from conftest import FakeProber


def _get_ping(prober):
    async def call():
        request = make_mocked_request("GET", "/ping", app=create_app(prober))
        return await handle_ping(request)

    return asyncio.run(call())


def test_ping_success_returns_latency():
    response = _get_ping(FakeProber([42]))
    assert response.status == 200
    assert json.loads(response.text) == {"latency": 42}


def test_ping_failure_returns_error():
    response = _get_ping(FakeProber([None]))
    assert response.status == 500
    assert json.loads(response.text) == {"error": "Ping failed"}


def test_app_routes_ping():
    app = create_app(FakeProber())
    paths = {route.resource.canonical for route in app.router.routes()}
    assert "/ping" in paths
