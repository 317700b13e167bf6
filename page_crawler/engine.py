# File: page_crawler/engine.py
"""page_crawler.engine: orchestration layer used by the CLI and tests to run one crawl."""

from __future__ import annotations

import asyncio
from typing import Optional

from page_crawler.config import CrawlerConfig, load_config
from page_crawler.crawler.crawler import Crawler
from page_crawler.crawler.models import CrawlResult
from page_crawler.logger import logger
from page_crawler.sink import Sink

__all__ = ["Engine", "start_crawl"]


async def start_crawl(cfg: CrawlerConfig, sink: Optional[Sink] = None) -> CrawlResult:
    """
    Run a crawler inside its context and return the final tallies.

    Parameters
    ----------
    cfg : CrawlerConfig
        Crawl configuration.
    sink : Sink, optional
        Record store; built from *cfg* when omitted.
    """
    async with Crawler(cfg, sink) as crawler:
        return await crawler.crawl()


class Engine:
    """Facade for scripts: load config, run the crawl synchronously with an optional timeout."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        return load_config(path)

    def __init__(self, config: CrawlerConfig, sink: Optional[Sink] = None) -> None:
        self.config = config
        self.sink = sink

    def run(self, timeout: Optional[float] = None) -> CrawlResult:
        """Blocking crawl; raises asyncio.TimeoutError when *timeout* seconds pass first."""
        logger.info("Starting crawl…")
        try:
            return asyncio.run(asyncio.wait_for(start_crawl(self.config, self.sink), timeout=timeout))
        except asyncio.TimeoutError:
            logger.error("Crawl did not finish within %s seconds", timeout)
            raise
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
