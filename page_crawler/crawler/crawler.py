# === FILE: page_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Iterable, Optional, Set

from aiohttp import ClientSession

from page_crawler.config import CrawlerConfig
from page_crawler.crawler.context import CrawlContext
from page_crawler.crawler.fetcher import Fetcher, build_session
from page_crawler.crawler.frontier import Frontier
from page_crawler.crawler.models import CrawlResult, FetchResult
from page_crawler.crawler.visited import VisitedSet
from page_crawler.errors import Failure, SinkUnavailableError
from page_crawler.logger import get_logger
from page_crawler.parser.html_parser import ParsedPage, process_page
from page_crawler.sink import Sink, build_sink
from page_crawler.stats import StatsCollector

__all__ = ("CrawlState", "Crawler")


class CrawlState(str, Enum):
    SEEDING = "seeding"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


class Crawler:
    """
    Breadth-first crawl from the configured seeds until the visited cap is
    reached or the frontier runs dry.

    At most ``config.concurrency`` fetches are in flight; ``1`` fetches one
    page at a time. Parsing runs on a pool of ``config.parse_workers`` threads
    and is never awaited before the next dequeue. The crawl is single-use:
    Seeding → Running → Draining → Done.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        sink: Optional[Sink] = None,
        *,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config
        self.sink: Sink = sink if sink is not None else build_sink(config)
        self.context = CrawlContext.create(
            self.sink, snippet_cap=config.snippet_cap, exact=config.exact_dedup
        )
        self.stats = StatsCollector(self.context.frontier, self.context.visited, config.stats_interval)
        self.state = CrawlState.SEEDING
        self.session = session
        self._owns_session = session is None
        self.fetcher: Optional[Fetcher] = Fetcher(session) if session is not None else None
        self.pages_parsed = 0
        self.fetch_failures = 0
        self.logger = get_logger("crawler")

    async def __aenter__(self) -> Crawler:
        if self.session is None:
            self.session = build_session(self.config)
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    @property
    def frontier(self) -> Frontier:
        return self.context.frontier

    @property
    def visited(self) -> VisitedSet:
        return self.context.visited

    async def crawl(self) -> CrawlResult:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        if self.state is not CrawlState.SEEDING:
            raise RuntimeError(f"crawl already {self.state.value}")

        await self._connect_sink()
        self.logger.info(
            "Crawl start: %s (cap %d, %d fetch slot(s))",
            ", ".join(self.config.seed_urls),
            self.config.max_pages,
            self.config.concurrency,
        )
        start = time.monotonic()
        self.stats.start()

        loop = asyncio.get_running_loop()
        executor = ThreadPoolExecutor(
            max_workers=self.config.parse_workers, thread_name_prefix="page-parser"
        )
        fetches: Set[asyncio.Future[Any]] = set()
        parses: Set[asyncio.Future[Any]] = set()
        try:
            self._seed(self.config.seed_urls)
            self.state = CrawlState.RUNNING
            while not self._cap_reached():
                self._dispatch_fetches(fetches)
                if not fetches and not parses:
                    self.logger.info("Frontier exhausted")
                    break
                done, _ = await asyncio.wait(fetches | parses, return_when=asyncio.FIRST_COMPLETED)
                self._collect(done, fetches, parses, loop, executor)

            # no new fetches from here on; finish what is in flight
            self.state = CrawlState.DRAINING
            while fetches or parses:
                done, _ = await asyncio.wait(fetches | parses, return_when=asyncio.FIRST_COMPLETED)
                self._collect(done, fetches, parses, loop, executor)
        finally:
            for task in fetches:
                task.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
            await self.stats.stop()
            await asyncio.to_thread(self.sink.disconnect)
            self.state = CrawlState.DONE

        duration = time.monotonic() - start
        result = CrawlResult(
            total_enqueued=self.frontier.total_enqueued,
            frontier_size=self.frontier.size(),
            visited_size=self.visited.size(),
            pages_parsed=self.pages_parsed,
            fetch_failures=self.fetch_failures,
            samples=list(self.stats.samples),
        )
        self.logger.info(
            "Finished: %d visited, %d parsed, %d failed in %.2f s",
            result.visited_size,
            result.pages_parsed,
            result.fetch_failures,
            duration,
        )
        return result

    def _seed(self, seeds: Iterable[str]) -> None:
        for url in seeds:
            self.context.admit(url)

    def _cap_reached(self) -> bool:
        return self.visited.size() >= self.config.max_pages

    def _dispatch_fetches(self, fetches: Set[asyncio.Future[Any]]) -> None:
        assert self.fetcher is not None
        while len(fetches) < self.config.concurrency and not self._cap_reached():
            url, ok = self.frontier.try_dequeue()
            if not ok:
                return
            if not self.visited.add(url):
                self.logger.debug("Already visited, skipping %s", url)
                continue
            fetches.add(asyncio.create_task(self.fetcher.fetch(url), name=f"fetch {url}"))

    def _collect(
        self,
        done: Set[asyncio.Future[Any]],
        fetches: Set[asyncio.Future[Any]],
        parses: Set[asyncio.Future[Any]],
        loop: asyncio.AbstractEventLoop,
        executor: ThreadPoolExecutor,
    ) -> None:
        for fut in done:
            if fut in fetches:
                fetches.discard(fut)
                result: FetchResult = fut.result()
                if not result.ok:
                    self.fetch_failures += 1
                    self.logger.warning("Failed %s: %s", result.url, result.failure)
                    continue
                if not result.content:
                    self.logger.debug("Empty body, skipping %s", result.url)
                    continue
                parses.add(
                    loop.run_in_executor(executor, self._parse, result.url, result.content)
                )
            else:
                parses.discard(fut)
                if fut.result() is not None:
                    self.pages_parsed += 1

    def _parse(self, url: str, content: bytes) -> Optional[ParsedPage]:
        # runs on a parser thread
        try:
            return process_page(url, content, self.context)
        except Exception as exc:
            self.logger.error("Parsing %s failed: %s", url, exc)
            return None

    async def _connect_sink(self) -> None:
        failure = await asyncio.to_thread(self.sink.connect)
        if failure is None:
            return
        if self.config.sink_required:
            raise SinkUnavailableError(Failure(failure.kind, failure.reason, fatal=True))
        self.logger.warning("Persistence disabled, crawling without storage: %s", failure)
