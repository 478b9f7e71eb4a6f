# File: novel_scout/utils.py
"""novel_scout.utils: URL helpers shared by the config layer, extractors and the engine."""

from __future__ import annotations

import os
from typing import Collection, List, Sequence
from urllib.parse import urljoin, urlparse

from novel_scout.errors import ConfigError
from novel_scout.logger import logger

__all__: Sequence[str] = (
    "MAX_PARALLEL",
    "default_concurrency",
    "normalize_base_url",
    "is_http_url",
    "extract_domain",
    "absolute_url",
    "remove_duplicates",
)

# Upper bound on simultaneous chapter downloads against one origin.
MAX_PARALLEL = 8


def default_concurrency() -> int:
    """``min(MAX_PARALLEL, число CPU)``, не меньше 1."""
    return max(1, min(MAX_PARALLEL, os.cpu_count() or 1))


def is_http_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_base_url(url: str) -> str:
    """Strip whitespace, validate the scheme and make sure the URL ends with ``/``."""
    url = url.strip()
    if not is_http_url(url):
        raise ConfigError(f"Not an http(s) URL: {url!r}")
    if not url.endswith("/"):
        url += "/"
    return url


def extract_domain(url: str) -> str:
    """Возвращает домен (без порта) в нижнем регистре."""
    return (urlparse(url).hostname or "").lower()


def absolute_url(base: str, href: str) -> str:
    return urljoin(base, href.strip())


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
