# File: page_crawler/report/__init__.py
"""page_crawler.report: human-readable summary and JSON export of a finished crawl."""

from __future__ import annotations

from page_crawler.crawler.models import CrawlResult
from page_crawler.report.json_report import render_json
from page_crawler.stats import render_series


def render_summary(result: CrawlResult) -> str:
    """Final tallies followed by both stats series, as printed at crawl end."""
    return (
        "\n------------------CRAWLER STATS------------------\n"
        f"Total queued: {result.total_enqueued}\n"
        f"To be crawled (Queue) size: {result.frontier_size}\n"
        f"Crawled size: {result.visited_size}\n"
        f"Pages parsed: {result.pages_parsed}\n"
        f"Fetch failures: {result.fetch_failures}\n"
        f"{render_series(result.samples)}"
    )


__all__ = ["render_json", "render_summary"]
