"""
HTTP ping endpoint for PingTrack.

``GET /ping`` answers ``200 {"latency": <ms>}`` or ``500 {"error": "Ping failed"}``.
"""

import asyncio
import logging

from aiohttp import web

from ..core.errors import ProbeError

logger = logging.getLogger(__name__)

PROBER_KEY = web.AppKey("prober", object)


async def handle_ping(request: web.Request) -> web.Response:
    prober = request.app[PROBER_KEY]
    loop = asyncio.get_running_loop()
    try:
        latency = await loop.run_in_executor(None, prober.probe)
    except ProbeError as e:
        logger.warning(f"Ping failed: {e}")
        return web.json_response({"error": "Ping failed"}, status=500)

    return web.json_response({"latency": latency})


def create_app(prober) -> web.Application:
    app = web.Application()
    app[PROBER_KEY] = prober
    app.router.add_get("/ping", handle_ping)
    return app


def run_server(prober, host: str, port: int) -> None:
    """Serve the ping endpoint until interrupted."""
    logger.info(f"Serving ping endpoint on http://{host}:{port}/ping")
    web.run_app(create_app(prober), host=host, port=port, print=None)
