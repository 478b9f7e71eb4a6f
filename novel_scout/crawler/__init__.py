# novel_scout/crawler/__init__.py
"""novel_scout.crawler: HTTP client and the bounded-concurrency chapter scheduler."""

from novel_scout.crawler.fetcher import HttpClient, Response
from novel_scout.crawler.scheduler import FetchScheduler

__all__ = ["HttpClient", "Response", "FetchScheduler"]
