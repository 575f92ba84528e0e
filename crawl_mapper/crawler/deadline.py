"""Immutable crawl deadline computed once at crawl start."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class Deadline:
    """Absolute end of the time budget on a monotonic *clock*."""

    started_at: float
    expires_at: float
    safety_margin: float

    @classmethod
    def start(cls, total_budget: float, safety_margin: float, clock: Clock = time.monotonic) -> Deadline:
        now = clock()
        return cls(started_at=now, expires_at=now + total_budget, safety_margin=safety_margin)

    def elapsed(self, now: float) -> float:
        return now - self.started_at

    def remaining(self, now: float) -> float:
        return self.expires_at - now

    def allows_new_batch(self, now: float) -> bool:
        """A batch may start only while more than ``safety_margin`` remains."""
        return self.remaining(now) > self.safety_margin
