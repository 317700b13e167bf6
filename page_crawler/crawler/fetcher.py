# page_crawler/crawler/fetcher.py
"""
Fetcher module: one HTTP GET per call, no retry, typed failure outcome.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_crawler.config import CrawlerConfig
from page_crawler.crawler.models import FetchResult
from page_crawler.errors import Failure, FailureKind
from page_crawler.logger import get_logger

log = get_logger("fetcher")


def build_session(config: CrawlerConfig) -> ClientSession:
    """Create the session shared by every fetch of a crawl."""
    timeout = ClientTimeout(total=config.fetch_timeout)
    return ClientSession(
        timeout=timeout,
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Retrieves raw page bytes; never raises for network or HTTP problems."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url* and read the whole body.

        Returns a FetchResult with ``content`` on a 2xx response, otherwise an
        empty result whose ``failure`` names the kind of problem.
        """
        status: Optional[int] = None
        try:
            async with self.session.get(url) as resp:
                status = resp.status
                if not 200 <= status < 300:
                    return self._failed(url, FailureKind.HTTP_STATUS, f"HTTP {status}", status)
                try:
                    body = await resp.read()
                except (ClientError, asyncio.TimeoutError) as exc:
                    return self._failed(url, FailureKind.READ, _describe(exc), status)
        except asyncio.TimeoutError as exc:
            return self._failed(url, FailureKind.TIMEOUT, _describe(exc), status)
        except (ClientError, ValueError) as exc:
            # aiohttp raises ValueError subclasses (InvalidURL) for unusable URLs
            return self._failed(url, FailureKind.NETWORK, _describe(exc), status)

        log.debug("Fetched %s (%d bytes)", url, len(body))
        return FetchResult(url=url, content=body, status=status)

    @staticmethod
    def _failed(url: str, kind: FailureKind, reason: str, status: Optional[int]) -> FetchResult:
        return FetchResult(url=url, status=status, failure=Failure(kind, reason))


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__
