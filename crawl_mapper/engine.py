# File: crawl_mapper/engine.py
"""crawl_mapper.engine: orchestration layer that runs a crawl-and-search and aggregates it."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from aiohttp import ClientSession, TCPConnector

from crawl_mapper.aggregator import CrawlReport, aggregate_results
from crawl_mapper.config import BatchConfig, load_config
from crawl_mapper.crawler.deadline import Clock, Deadline
from crawl_mapper.crawler.fetcher import ContentFetcher, ContentSource
from crawl_mapper.crawler.scheduler import BatchScheduler, ProgressCallback
from crawl_mapper.crawler.sitemap import SitemapFetcher, SitemapSource
from crawl_mapper.logger import logger
from crawl_mapper.utils import base_site_url, sitemap_url_for

__all__ = ["Engine", "crawl_and_search", "search_with_sources"]


async def search_with_sources(
    sitemap_url: str,
    query: str,
    config: BatchConfig,
    *,
    sitemap_source: SitemapSource,
    content_source: ContentSource,
    progress: Optional[ProgressCallback] = None,
    clock: Clock = time.monotonic,
) -> CrawlReport:
    """Run one crawl against explicit sitemap and content sources.

    SitemapUnavailable from *sitemap_source* propagates before any batch runs.
    """
    deadline = Deadline.start(config.total_budget, config.safety_margin, clock)
    urls = await sitemap_source.fetch_urls(sitemap_url)
    logger.info('Searching for "%s" in %d pages...', query, len(urls))

    scheduler = BatchScheduler(config, content_source, clock=clock, progress=progress)
    outcome = await scheduler.run(urls, base_site_url(sitemap_url), query, deadline)

    report = aggregate_results(
        outcome,
        sitemap_url=sitemap_url,
        query=query,
        total_urls_found=len(urls),
        max_urls_to_process=config.max_urls_to_process,
    )
    logger.info(
        "Search completed: %d of %d pages contain %r (%d batches, %.2f s%s)",
        report.found_pages, report.total_pages, query, report.batches_processed,
        report.elapsed_time, ", timed out" if report.timed_out else "",
    )
    return report


async def crawl_and_search(
    site_or_sitemap_url: str,
    query: str,
    config: Optional[BatchConfig] = None,
    *,
    progress: Optional[ProgressCallback] = None,
) -> CrawlReport:
    """Fetch the site's sitemap and report which pages contain *query*."""
    if not query or not query.strip():
        raise ValueError("query must be a non-empty string")
    config = config or BatchConfig()
    sitemap_url = sitemap_url_for(site_or_sitemap_url)

    connector = TCPConnector(limit=max(config.batch_size, 1))
    async with ClientSession(
        connector=connector, headers={"User-Agent": config.user_agent}
    ) as session:
        return await search_with_sources(
            sitemap_url,
            query,
            config,
            sitemap_source=SitemapFetcher(session, config.sitemap_timeout, config.max_bytes),
            content_source=ContentFetcher(session),
            progress=progress,
        )


class Engine:
    """Facade for the CLI and tests: load config, run a crawl, return the report."""

    @staticmethod
    def load_config(path: Optional[str]) -> BatchConfig:
        """Load a YAML/JSON config or fall back to the defaults."""
        return load_config(path)

    def __init__(self, config: BatchConfig) -> None:
        self.config = config

    def search(
        self, site: str, query: str, progress: Optional[ProgressCallback] = None
    ) -> CrawlReport:
        """Blocking wrapper around :func:`crawl_and_search`."""
        logger.info("Starting crawl of %s", site)
        try:
            return asyncio.run(crawl_and_search(site, query, self.config, progress=progress))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
