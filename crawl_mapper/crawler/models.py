"""
Data models for the CrawlMapper batch crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class CrawlState(str, Enum):
    """Lifecycle of one scheduler run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class PageResult:
    """Outcome of searching one sitemap URL.

    ``url`` is the address as declared in the sitemap, ``resolved_url`` the
    absolute address that was fetched and ``index`` its declaration position.
    """

    url: str
    found: bool
    index: int = 0
    resolved_url: str = ""


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Emitted by the scheduler after every finished batch."""

    batch_number: int
    batch_size: int
    urls_processed: int
    urls_total: int
    found_so_far: int
    elapsed: float
    remaining_budget: float


@dataclass(slots=True)
class ScheduleOutcome:
    """Raw scheduler output consumed by the aggregator."""

    results: List[PageResult] = field(default_factory=list)
    batches_processed: int = 0
    elapsed: float = 0.0
    state: CrawlState = CrawlState.IDLE

    @property
    def urls_processed(self) -> int:
        return len(self.results)

    @property
    def timed_out(self) -> bool:
        return self.state is CrawlState.TIMED_OUT
