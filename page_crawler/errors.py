# File: page_crawler/errors.py
"""page_crawler.errors: typed failure outcomes and the crawler's exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = ("FailureKind", "Failure", "CrawlerError", "SinkUnavailableError")


class FailureKind(str, Enum):
    """What went wrong during a fetch or a sink operation."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    READ = "read"
    SINK_UNAVAILABLE = "sink_unavailable"
    SINK_WRITE = "sink_write"


@dataclass(frozen=True, slots=True)
class Failure:
    """Outcome returned instead of raising; the orchestrator decides what to do with it."""

    kind: FailureKind
    reason: str
    fatal: bool = False

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.reason}"


class CrawlerError(Exception):
    """Base class for errors that stop a crawl."""


class SinkUnavailableError(CrawlerError):
    """Raised when persistence is mandatory but the sink cannot connect."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(f"Sink unavailable ({failure})")
        self.failure = failure
