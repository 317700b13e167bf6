# page_crawler/crawler/__init__.py
"""Crawl engine: frontier, visited set, fetcher and the orchestrating crawler."""
