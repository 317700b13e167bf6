# page_crawler/crawler/models.py
"""
Data models for the PageCrawler engine.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from page_crawler.errors import Failure


@dataclass(slots=True)
class FetchResult:
    """Outcome of one retrieval: raw bytes on success, a typed failure otherwise."""

    url: str
    content: bytes = b""
    status: Optional[int] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(slots=True)
class PageRecord:
    """What the sink stores for one page."""

    url: str
    title: str = ""
    content: str = ""

    def to_document(self) -> Dict[str, str]:
        # fresh dict per call: pymongo adds ``_id`` to the mapping it inserts
        return {"url": self.url, "title": self.title, "content": self.content}


@dataclass(slots=True)
class StatsSample:
    elapsed_minutes: float
    visited_count: int
    visited_over_frontier_ratio: float


@dataclass(slots=True)
class CrawlResult:
    """Final tallies of a finished crawl."""

    total_enqueued: int
    frontier_size: int
    visited_size: int
    pages_parsed: int = 0
    fetch_failures: int = 0
    samples: List[StatsSample] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
