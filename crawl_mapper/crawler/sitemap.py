"""
Sitemap source: download sitemap.xml and turn it into the ordered list of page URLs.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout
from lxml import etree

from crawl_mapper.crawler.fetcher import PageTooLarge, read_limited
from crawl_mapper.exceptions import SitemapUnavailable
from crawl_mapper.parser.sitemap_parser import parse_sitemap


class SitemapSource(Protocol):
    """Returns declared page URLs or raises SitemapUnavailable."""

    async def fetch_urls(self, sitemap_url: str) -> List[str]: ...


class SitemapFetcher:
    """Fetches and parses a sitemap with a single GET."""

    def __init__(
        self, session: ClientSession, timeout: float, max_bytes: int = 5 * 1024 * 1024
    ) -> None:
        self.session = session
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.logger = logging.getLogger("CrawlMapper")

    async def fetch_urls(self, sitemap_url: str) -> List[str]:
        self.logger.info("Fetching sitemap from: %s", sitemap_url)
        try:
            async with self.session.get(
                sitemap_url, timeout=ClientTimeout(total=self.timeout), raise_for_status=False
            ) as resp:
                if resp.status == 404:
                    raise SitemapUnavailable(
                        sitemap_url, "the sitemap.xml file does not exist", status=404
                    )
                if not 200 <= resp.status < 300:
                    raise SitemapUnavailable(
                        sitemap_url, f"server returned {resp.status} status code", status=resp.status
                    )
                payload = await read_limited(resp, self.max_bytes)
        except asyncio.TimeoutError as exc:
            raise SitemapUnavailable(sitemap_url, f"timed out after {self.timeout} s") from exc
        except PageTooLarge as exc:
            raise SitemapUnavailable(
                sitemap_url, f"sitemap larger than {self.max_bytes} bytes"
            ) from exc
        except ClientError as exc:
            raise SitemapUnavailable(sitemap_url, str(exc) or type(exc).__name__) from exc

        try:
            urls = parse_sitemap(payload)
        except etree.XMLSyntaxError as exc:
            raise SitemapUnavailable(sitemap_url, f"invalid XML: {exc}") from exc

        self.logger.info("Found %d URLs in sitemap", len(urls))
        return urls
