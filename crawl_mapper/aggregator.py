# File: crawl_mapper/aggregator.py
"""crawl_mapper.aggregator: builds the final crawl report from scheduler output."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from crawl_mapper.crawler.models import PageResult, ScheduleOutcome


@dataclass(frozen=True, slots=True)
class CrawlReport:
    """Outcome of one crawl-and-search run, read-only once built."""

    sitemap_url: str
    query: str
    total_urls_found: int
    urls_processed: int
    batches_processed: int
    elapsed_time: float
    timed_out: bool
    truncated: bool
    max_urls_to_process: int
    results: Tuple[PageResult, ...] = field(default_factory=tuple)
    matching_urls: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def total_pages(self) -> int:
        return self.urls_processed

    @property
    def found_pages(self) -> int:
        return len(self.matching_urls)

    def as_dict(self) -> Dict[str, Any]:
        """Plain-data view used by the JSON report and `--format json`."""
        return {
            "sitemap_url": self.sitemap_url,
            "query": self.query,
            "total_urls_found": self.total_urls_found,
            "urls_processed": self.urls_processed,
            "batches_processed": self.batches_processed,
            "elapsed_time": round(self.elapsed_time, 3),
            "timed_out": self.timed_out,
            "truncated": self.truncated,
            "max_urls_to_process": self.max_urls_to_process,
            "total_pages": self.total_pages,
            "found_pages": self.found_pages,
            "matching_urls": list(self.matching_urls),
            "all_results": [{"url": r.url, "found": r.found} for r in self.results],
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(
    outcome: ScheduleOutcome,
    *,
    sitemap_url: str,
    query: str,
    total_urls_found: int,
    max_urls_to_process: int,
) -> CrawlReport:
    """Collect scheduler output into a CrawlReport.

    Results are ordered by their sitemap position, so ``matching_urls`` keeps
    discovery order whatever order the fetches finished in.
    """
    results = tuple(sorted(outcome.results, key=lambda r: r.index))
    return CrawlReport(
        sitemap_url=sitemap_url,
        query=query,
        total_urls_found=total_urls_found,
        urls_processed=len(results),
        batches_processed=outcome.batches_processed,
        elapsed_time=outcome.elapsed,
        timed_out=outcome.timed_out,
        truncated=total_urls_found > max_urls_to_process,
        max_urls_to_process=max_urls_to_process,
        results=results,
        matching_urls=tuple(r.url for r in results if r.found),
    )
