# page_crawler/crawler/context.py
"""
Handles that a crawl passes explicitly to every parse task it spawns.
"""
from __future__ import annotations

from dataclasses import dataclass

from page_crawler.crawler.frontier import Frontier
from page_crawler.crawler.visited import VisitedSet
from page_crawler.sink import Sink


@dataclass(slots=True)
class CrawlContext:
    """Shared crawl state; all members are internally synchronized."""

    frontier: Frontier
    visited: VisitedSet
    seen: VisitedSet
    sink: Sink
    snippet_cap: int = 500

    @classmethod
    def create(cls, sink: Sink, *, snippet_cap: int = 500, exact: bool = False) -> CrawlContext:
        return cls(
            frontier=Frontier(),
            visited=VisitedSet(exact=exact),
            seen=VisitedSet(exact=exact),
            sink=sink,
            snippet_cap=snippet_cap,
        )

    def admit(self, url: str) -> bool:
        """Enqueue *url* unless it was ever admitted before; True when enqueued."""
        if not self.seen.add_if_absent(url):
            return False
        self.frontier.enqueue(url)
        return True
