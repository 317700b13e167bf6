# page_crawler/parser/__init__.py
"""Markup parsing of fetched pages."""
