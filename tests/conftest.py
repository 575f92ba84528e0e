# File: tests/conftest.py
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Dict, List, Optional, Union

import pytest
from aiohttp import web

from crawl_mapper.config import BatchConfig
from crawl_mapper.exceptions import SitemapUnavailable

SITEMAP_URL = "https://www.example.com/sitemap.xml"

HTML_WITH_TERM = """
<!DOCTYPE html>
<html>
<head><title>Test Page</title></head>
<body>
    <h1>Welcome to our site</h1>
    <p>This page contains the fillout form for registration.</p>
</body>
</html>
"""

HTML_WITHOUT_TERM = """
<!DOCTYPE html>
<html>
<head><title>Test Page 2</title></head>
<body>
    <p>This page does not contain the search term.</p>
</body>
</html>
"""


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)


PageValue = Union[Optional[str], Exception, Callable[[], object]]


class FakeContentSource:
    """Serves canned bodies; records every requested URL.

    A page value may be a string, None (absent), an exception to raise, or a
    coroutine function to await. ``cost`` advances *clock* on every fetch.
    """

    def __init__(
        self,
        pages: Dict[str, PageValue],
        *,
        clock: Optional[FakeClock] = None,
        cost: float = 0.0,
    ) -> None:
        self.pages = pages
        self.clock = clock
        self.cost = cost
        self.requested: List[str] = []

    async def fetch(self, url: str, timeout: float, max_bytes: int) -> Optional[str]:
        self.requested.append(url)
        if self.clock is not None:
            self.clock.advance(self.cost)
        value = self.pages.get(url)
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return await value()
        return value


class FakeSitemapSource:
    def __init__(self, urls: Union[List[str], SitemapUnavailable]) -> None:
        self.urls = urls
        self.calls = 0

    async def fetch_urls(self, sitemap_url: str) -> List[str]:
        self.calls += 1
        if isinstance(self.urls, Exception):
            raise self.urls
        return list(self.urls)


@pytest.fixture()
def fast_config() -> BatchConfig:
    """Config without pauses and with a generous budget."""
    return BatchConfig(
        batch_size=5,
        per_url_timeout=2.0,
        inter_batch_delay=0.0,
        total_budget=30.0,
        safety_margin=1.0,
    )


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def page_urls() -> List[str]:
    return [f"https://www.example.com/page{i}" for i in range(1, 4)]


@pytest.fixture()
def serve_app(unused_tcp_port_factory):
    """Return an async context manager that serves an aiohttp app and yields its base URL."""

    @asynccontextmanager
    async def _serve(app: web.Application):
        runner = web.AppRunner(app)
        await runner.setup()
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        try:
            yield f"http://127.0.0.1:{port}"
        finally:
            await runner.cleanup()

    return _serve


async def slow_page(seconds: float = 5.0, body: str = HTML_WITH_TERM) -> str:
    await asyncio.sleep(seconds)
    return body
