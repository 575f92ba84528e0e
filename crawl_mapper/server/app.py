"""Local HTTP endpoint built on aiohttp.web."""
from __future__ import annotations

from typing import Optional

from aiohttp import web

from crawl_mapper.config import BatchConfig
from crawl_mapper.server.payloads import CORS_HEADERS, error_body, handle_search

CONFIG_KEY = web.AppKey("config", BatchConfig)


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        return web.Response(status=200, headers=CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


async def search(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        status, payload = 400, error_body("Request body must be valid JSON")
    else:
        status, payload = await handle_search(body, request.app[CONFIG_KEY])
    return web.json_response(payload, status=status)


async def health(_: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "message": "CrawlMapper API is running"})


def create_app(config: Optional[BatchConfig] = None) -> web.Application:
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config or BatchConfig()
    app.router.add_post("/api/search", search)
    app.router.add_get("/api/health", health)
    return app


def run_server(config: BatchConfig, host: str = "localhost", port: int = 3000) -> None:
    web.run_app(create_app(config), host=host, port=port)
