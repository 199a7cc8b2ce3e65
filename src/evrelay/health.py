"""Liveness and readiness probe: always healthy once the process is up.

Runs on the same event loop as the scanner but never touches scan state.
"""

from __future__ import annotations

import logging

from aiohttp import web

from evrelay.core.config import parse_bind_addr

logger = logging.getLogger(__name__)


async def live_handler(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def make_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", live_handler)
    app.router.add_get("/live", live_handler)
    app.router.add_get("/ready", live_handler)
    return app


async def start_liveness(addr: str) -> web.AppRunner:
    """Bind the probe on `host:port` and return its runner (call `cleanup()` to stop)."""
    host, port = parse_bind_addr(addr)
    runner = web.AppRunner(make_app(), access_log=None)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("liveness probe listening on %s:%d", host, port)
    return runner
