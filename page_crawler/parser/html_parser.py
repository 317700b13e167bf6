# === FILE: page_crawler/parser/html_parser.py ===
"""HTML parsing for PageCrawler.

Turns the raw bytes of a fetched page into what the crawl needs:

* title: text of the first ``<title>`` element or ``""`` if absent.
* content: a snippet of visible body text, at most ``snippet_cap`` characters.
  Text of ``<script>``, ``<style>``, ``<noscript>`` and ``<template>`` subtrees
  is skipped, and so is anchor text (it describes the link, not the page).
* links: every ``<a href>`` whose value is an absolute http(s) URL, in document
  order. Empty and relative hrefs are dropped without complaint.

:func:`parse_page` is pure. :func:`process_page` is what a crawl runs per page:
it parses, admits new links into the frontier and hands the record to the sink.
BeautifulSoup is tolerant of broken markup; missing pieces just leave fields empty.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from page_crawler.crawler.context import CrawlContext
from page_crawler.crawler.models import PageRecord
from page_crawler.logger import get_logger

__all__: Sequence[str] = ("ParsedPage", "parse_page", "process_page", "is_crawlable_link")

log = get_logger("parser")

#: elements whose whole subtree contributes no text
SKIPPED_TAGS = frozenset(("script", "style", "noscript", "template"))
#: elements whose text is not page content
_NON_CONTENT_TAGS = SKIPPED_TAGS | {"a", "title"}

_LINK_SCHEMES = ("http", "https")


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of a parsed HTML page."""

    url: str
    title: str = ""
    content: str = ""
    links: list[str] = field(default_factory=list)

    @property
    def record(self) -> PageRecord:
        return PageRecord(url=self.url, title=self.title, content=self.content)


def is_crawlable_link(href: Optional[str]) -> bool:
    """True for non-empty absolute ``http``/``https`` URLs with a host."""
    if not href:
        return False
    href = href.strip()
    if not href:
        return False
    try:
        parsed = urlparse(href)
    except ValueError:
        return False
    return parsed.scheme.lower() in _LINK_SCHEMES and bool(parsed.netloc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_content_text(node: NavigableString, body: Tag) -> bool:
    if isinstance(node, PreformattedString):  # comments, doctype, CDATA
        return False
    for parent in node.parents:
        if parent is body:
            return True
        if parent.name in _NON_CONTENT_TAGS:
            return False
    return False


def _body_snippet(body: Optional[Tag], cap: int) -> str:
    if body is None or cap <= 0:
        return ""
    parts: list[str] = []
    length = 0
    for node in body.descendants:
        if not isinstance(node, NavigableString) or not _is_content_text(node, body):
            continue
        text = node.strip()
        if not text:
            continue
        if parts:
            text = " " + text
        room = cap - length
        if len(text) >= room:
            parts.append(text[:room])
            break
        parts.append(text)
        length += len(text)
    return "".join(parts).rstrip()


def _links(soup: BeautifulSoup) -> list[str]:
    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if isinstance(href, str) and is_crawlable_link(href):
            links.append(href.strip())
    return links


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------


def parse_page(url: str, content: Union[bytes, str], snippet_cap: int = 500) -> ParsedPage:
    """Parse *content* fetched from *url*; never raises on malformed markup."""
    soup = BeautifulSoup(content, "html.parser")

    title_tag = soup.find("title")
    title = title_tag.get_text(strip=True) if isinstance(title_tag, Tag) else ""

    body = soup.body
    return ParsedPage(
        url=url,
        title=title,
        content=_body_snippet(body if isinstance(body, Tag) else None, snippet_cap),
        links=_links(soup),
    )


def process_page(url: str, content: Union[bytes, str], context: CrawlContext) -> ParsedPage:
    """
    Parse one fetched page and feed the crawl with it.

    Each link not admitted before is enqueued into the frontier exactly once
    (reservation happens through ``context.seen``), then the page record goes
    to the sink. Safe to run from several threads at once.
    """
    page = parse_page(url, content, context.snippet_cap)

    admitted = 0
    for link in page.links:
        if context.admit(link):
            admitted += 1

    failure = context.sink.insert(page.record)
    if failure is not None:
        log.warning("Record for %s not stored: %s", url, failure)

    log.info("Count: %d | %s -> %s", context.visited.size(), url, page.title)
    log.debug("%s: %d links, %d new", url, len(page.links), admitted)
    return page
