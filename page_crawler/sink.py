# File: page_crawler/sink.py
"""page_crawler.sink: persistence of page records.

A sink is connected once at crawl start (wiping what an earlier crawl stored),
receives one :class:`PageRecord` per parsed page, and is disconnected once at
crawl end. Operations report problems as :class:`Failure` values; whether a
failure stops the crawl is the orchestrator's decision.

``insert`` is called from parser threads, so implementations must be
thread-safe (pymongo's ``MongoClient`` is).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from page_crawler.config import CrawlerConfig
from page_crawler.crawler.models import PageRecord
from page_crawler.errors import Failure, FailureKind
from page_crawler.logger import get_logger

__all__ = ["Sink", "NullSink", "MongoSink", "build_sink"]

log = get_logger("sink")


class Sink(ABC):
    """Contract shared by every record store."""

    @abstractmethod
    def connect(self) -> Optional[Failure]:
        """Open the store and clear previously stored records."""

    @abstractmethod
    def insert(self, record: PageRecord) -> Optional[Failure]:
        """Persist *record*; a no-op while the sink is disabled."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release resources."""


class NullSink(Sink):
    """Sink that stores nothing."""

    def connect(self) -> Optional[Failure]:
        return None

    def insert(self, record: PageRecord) -> Optional[Failure]:
        return None

    def disconnect(self) -> None:
        return None


class MongoSink(Sink):
    """Stores records in one MongoDB collection; disabled without a URI."""

    def __init__(
        self,
        uri: Optional[str],
        database: str = "webCrawlerArchive",
        collection: str = "webpages",
        *,
        server_timeout_ms: int = 5000,
    ) -> None:
        self.uri = uri
        self.database = database
        self.collection_name = collection
        self.server_timeout_ms = server_timeout_ms
        self.client: Optional[MongoClient] = None
        self.collection: Any = None

    @property
    def enabled(self) -> bool:
        return self.collection is not None

    def connect(self) -> Optional[Failure]:
        if not self.uri:
            return Failure(FailureKind.SINK_UNAVAILABLE, "no MongoDB connection string configured")
        try:
            self.client = MongoClient(self.uri, serverSelectionTimeoutMS=self.server_timeout_ms)
            self.client.admin.command("ping")
            collection = self.client[self.database][self.collection_name]
            deleted = collection.delete_many({})
        except PyMongoError as exc:
            self._close_client()
            return Failure(FailureKind.SINK_UNAVAILABLE, f"could not connect to MongoDB: {exc}")

        self.collection = collection
        log.info(
            "Connected to MongoDB %s.%s (cleared %d stored pages)",
            self.database,
            self.collection_name,
            deleted.deleted_count,
        )
        return None

    def insert(self, record: PageRecord) -> Optional[Failure]:
        if self.collection is None:
            return None
        try:
            self.collection.insert_one(record.to_document())
        except PyMongoError as exc:
            return Failure(FailureKind.SINK_WRITE, f"insert of {record.url} failed: {exc}")
        return None

    def disconnect(self) -> None:
        self.collection = None
        self._close_client()

    def _close_client(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None


def build_sink(config: CrawlerConfig) -> Sink:
    """Sink described by *config*: MongoDB, disabled when no URI is set."""
    return MongoSink(
        config.mongodb_uri,
        database=config.mongodb_database,
        collection=config.mongodb_collection,
    )
