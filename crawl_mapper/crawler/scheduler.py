from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Sequence

from crawl_mapper.config import BatchConfig
from crawl_mapper.crawler.deadline import Clock, Deadline
from crawl_mapper.crawler.fetcher import ContentSource
from crawl_mapper.crawler.models import BatchProgress, CrawlState, PageResult, ScheduleOutcome
from crawl_mapper.crawler.search import contains_query
from crawl_mapper.utils import resolve_url

__all__ = ("BatchScheduler", "ProgressCallback")

ProgressCallback = Callable[[BatchProgress], None]
Sleeper = Callable[[float], Awaitable[None]]


class BatchScheduler:
    """Runs fetch+search over sitemap URLs in fixed-size concurrent batches.

    Batches are strictly sequential. Before each batch the deadline is checked;
    once no more than ``safety_margin`` seconds remain, the run stops in the
    TIMED_OUT state and keeps what it has. Fetches already dispatched are never
    cancelled by the deadline, only by their own ``per_url_timeout``.
    """

    def __init__(
        self,
        config: BatchConfig,
        source: ContentSource,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.config = config
        self.source = source
        self.clock = clock
        self.sleep = sleep
        self.progress = progress
        self.state = CrawlState.IDLE
        self.logger = logging.getLogger("CrawlMapper")

    def candidates(self, urls: Sequence[str]) -> List[str]:
        """Only the first ``max_urls_to_process`` declared URLs are ever processed."""
        return list(urls[: self.config.max_urls_to_process])

    async def run(
        self, urls: Sequence[str], base_url: str, query: str, deadline: Deadline
    ) -> ScheduleOutcome:
        if self.state is not CrawlState.IDLE:
            raise RuntimeError(f"scheduler already used (state={self.state.value})")
        cfg = self.config
        pending = self.candidates(urls)
        if len(pending) < len(urls):
            self.logger.warning(
                "Sitemap declares %d URLs, only the first %d will be processed",
                len(urls), len(pending),
            )

        outcome = ScheduleOutcome()
        self.state = CrawlState.RUNNING
        found = 0

        for offset in range(0, len(pending), cfg.batch_size):
            now = self.clock()
            if not deadline.allows_new_batch(now):
                self.logger.info(
                    "Time budget nearly spent (%.2f s left), stopping after %d batches",
                    deadline.remaining(now), outcome.batches_processed,
                )
                self.state = CrawlState.TIMED_OUT
                break

            batch = pending[offset : offset + cfg.batch_size]
            results = await self._run_batch(batch, offset, base_url, query)
            outcome.results.extend(results)
            outcome.batches_processed += 1
            found += sum(1 for r in results if r.found)

            now = self.clock()
            self.logger.info(
                "Processed %d/%d URLs, found %d matches",
                outcome.urls_processed, len(pending), found,
            )
            if self.progress is not None:
                self.progress(
                    BatchProgress(
                        batch_number=outcome.batches_processed,
                        batch_size=len(batch),
                        urls_processed=outcome.urls_processed,
                        urls_total=len(pending),
                        found_so_far=found,
                        elapsed=deadline.elapsed(now),
                        remaining_budget=deadline.remaining(now),
                    )
                )

            if outcome.batches_processed >= cfg.max_batches:
                if outcome.urls_processed < len(pending):
                    self.logger.info("Batch limit of %d reached", cfg.max_batches)
                break
            if offset + cfg.batch_size < len(pending) and cfg.inter_batch_delay > 0:
                await self.sleep(cfg.inter_batch_delay)

        if self.state is CrawlState.RUNNING:
            self.state = CrawlState.COMPLETED
        outcome.state = self.state
        outcome.elapsed = deadline.elapsed(self.clock())
        return outcome

    async def _run_batch(
        self, batch: Sequence[str], offset: int, base_url: str, query: str
    ) -> List[PageResult]:
        tasks = [
            self._search_one(url, offset + i, base_url, query) for i, url in enumerate(batch)
        ]
        return list(await asyncio.gather(*tasks))

    async def _search_one(self, url: str, index: int, base_url: str, query: str) -> PageResult:
        resolved = resolve_url(url, base_url)
        timeout = self.config.per_url_timeout
        try:
            content = await asyncio.wait_for(
                self.source.fetch(resolved, timeout, self.config.max_bytes), timeout=timeout
            )
        except asyncio.TimeoutError:
            self.logger.warning("Could not fetch %s: no answer within %.1f s", resolved, timeout)
            content = None
        except Exception as exc:
            self.logger.warning("Error processing %s: %s", resolved, exc)
            content = None
        found = contains_query(content, query)
        if found:
            self.logger.debug("Found %r in %s", query, resolved)
        return PageResult(url=url, found=found, index=index, resolved_url=resolved)
