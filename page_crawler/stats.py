# File: page_crawler/stats.py
"""page_crawler.stats: throughput sampling on a wall-clock timer, independent of crawl progress."""

from __future__ import annotations

import asyncio
import time
from typing import List, Optional

from page_crawler.crawler.frontier import Frontier
from page_crawler.crawler.models import StatsSample
from page_crawler.crawler.visited import VisitedSet
from page_crawler.logger import get_logger

__all__ = ["StatsCollector", "render_series"]

log = get_logger("stats")


class StatsCollector:
    """Samples visited count and visited/frontier ratio every *interval* seconds."""

    def __init__(self, frontier: Frontier, visited: VisitedSet, interval: float = 60.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.frontier = frontier
        self.visited = visited
        self.interval = interval
        self.samples: List[StatsSample] = []
        self._started_at: Optional[float] = None
        self._done: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task[None]] = None

    def start(self) -> None:
        """Begin ticking on the running event loop; records the zero sample."""
        if self._task is not None:
            raise RuntimeError("stats collector already started")
        self._started_at = time.monotonic()
        self.samples.append(StatsSample(0.0, 0, 0.0))
        self._done = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="stats-collector")

    async def stop(self) -> None:
        """Signal the timer to finish and wait for it."""
        if self._task is None or self._done is None:
            return
        self._done.set()
        await self._task

    def sample(self) -> StatsSample:
        """Take one sample now and append it to the series."""
        started = self._started_at if self._started_at is not None else time.monotonic()
        elapsed = (time.monotonic() - started) / 60.0
        visited = self.visited.size()
        pending = self.frontier.size()
        ratio = visited / pending if pending else 0.0
        sample = StatsSample(elapsed, visited, ratio)
        self.samples.append(sample)
        log.debug("Stats: %.2f min, %d visited, ratio %.4f", elapsed, visited, ratio)
        return sample

    async def _run(self) -> None:
        assert self._done is not None
        while True:
            try:
                await asyncio.wait_for(self._done.wait(), timeout=self.interval)
                return
            except asyncio.TimeoutError:
                self.sample()

    def render(self) -> str:
        return render_series(self.samples)


def render_series(samples: List[StatsSample]) -> str:
    """Two aligned ``<minutes> <value>`` series, pages first, then the ratio."""
    pages = "\n".join(f"{s.elapsed_minutes:f} {s.visited_count}" for s in samples)
    ratio = "\n".join(f"{s.elapsed_minutes:f} {s.visited_over_frontier_ratio:f}" for s in samples)
    return (
        "pages crawled per minute\n"
        f"{pages}\n\n"
        "Crawled to queue ratio per minute\n"
        f"{ratio}\n"
    )
