"""crawl_mapper.exceptions: crawl-level errors raised across the orchestrator boundary."""

from __future__ import annotations

from typing import Optional


class CrawlMapperError(Exception):
    """Base class for failures that abort a whole crawl."""


class SitemapUnavailable(CrawlMapperError):
    """The sitemap could not be fetched or parsed; no batch work was started.

    ``status`` holds the HTTP status when the server answered, otherwise None.
    """

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"Sitemap not found at {url}: {reason}")


__all__ = ["CrawlMapperError", "SitemapUnavailable"]
