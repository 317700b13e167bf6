# File: tests/conftest.py
import logging
import threading
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import List, Optional

import pytest
import pytest_asyncio
from aiohttp import web

from page_crawler.config import CrawlerConfig
from page_crawler.crawler.context import CrawlContext
from page_crawler.crawler.models import PageRecord
from page_crawler.errors import Failure
from page_crawler.sink import Sink


class RecordingSink(Sink):
    """In-memory sink that remembers every call."""

    def __init__(self, connect_failure: Optional[Failure] = None) -> None:
        self.connect_failure = connect_failure
        self.records: List[PageRecord] = []
        self.connected = False
        self.disconnect_calls = 0
        self._lock = threading.Lock()

    def connect(self) -> Optional[Failure]:
        if self.connect_failure is not None:
            return self.connect_failure
        self.connected = True
        self.records.clear()
        return None

    def insert(self, record: PageRecord) -> Optional[Failure]:
        with self._lock:
            self.records.append(record)
        return None

    def disconnect(self) -> None:
        self.connected = False
        self.disconnect_calls += 1

    def urls(self) -> set[str]:
        return {r.url for r in self.records}


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def context(sink: RecordingSink) -> CrawlContext:
    return CrawlContext.create(sink, snippet_cap=500)


@pytest.fixture(autouse=True)
def reset_logger():
    """CLI tests reconfigure the project logger; let caplog see records again."""
    lg = logging.getLogger("PageCrawler")
    lg.handlers.clear()
    lg.propagate = True
    lg.setLevel(logging.DEBUG)
    yield
    lg.handlers.clear()
    lg.propagate = True


@pytest.fixture(autouse=True)
def no_mongodb_env(monkeypatch):
    """Keep a developer's MONGODB_URI out of the tests."""
    monkeypatch.delenv("MONGODB_URI", raising=False)


@pytest.fixture()
def basic_config() -> CrawlerConfig:
    """
    Return a basic valid CrawlerConfig for crawler tests.
    """
    return CrawlerConfig(
        seed_urls=["http://example.com/"],
        max_pages=10,
        stats_interval=60.0,
        fetch_timeout=2.0,
        user_agent="TestAgent/1.0",
    )


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start aiohttp apps on free ports; returns their base URLs, cleans up afterwards."""
    runners: List[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        runners.append(runner)
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        return f"http://127.0.0.1:{port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()
