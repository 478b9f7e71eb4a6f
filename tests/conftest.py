# File: tests/conftest.py
from __future__ import annotations

import asyncio
import random
from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Tuple

import pytest
from aiohttp import web

from novel_scout.crawler.fetcher import Response
from novel_scout.errors import FetchError

SITE = "https://boxnovel.com/novel/test-novel/"


# --------------------------------------------------------------------------- #
#                               Markup builders                               #
# --------------------------------------------------------------------------- #


def boxnovel_index(
    site: str,
    chapter_count: int,
    *,
    title: Optional[str] = "Test Novel",
    author: Optional[str] = "Jane Doe",
    cover: Optional[str] = "https://boxnovel.com/covers/test.jpg",
    sidebar: bool = True,
) -> str:
    """Madara-style index page listing chapters newest first."""
    crumbs = (
        '<ol class="breadcrumb"><li><a href="/">Home</a></li>'
        '<li><a href="/novel/">Novels</a></li>'
        f'<li class="active"><a href="{site}">{title}</a></li></ol>'
        if title is not None
        else ""
    )
    author_block = (
        f'<div class="post-content_item"><div class="author-content"><a href="/author/x">{author}</a></div></div>'
        if author is not None
        else ""
    )
    cover_block = (
        f'<div class="summary_image"><a href="{site}"><img src="{cover}" /></a></div>' if cover else ""
    )
    items = "".join(
        f'<li class="wp-manga-chapter"><a href="{site}chapter-{n}/">Chapter {n}</a></li>'
        for n in range(chapter_count, 0, -1)
    )
    side = (
        f'<div class="sidebar"><a href="{site}chapter-1/">Start reading</a>'
        '<a href="https://boxnovel.com/novel/other-novel/">Other</a></div>'
        if sidebar
        else ""
    )
    return (
        "<html><head><title>Index</title></head><body>"
        f"{crumbs}{cover_block}{author_block}"
        f'<div class="listing-chapters_wrap"><ul class="main version-chap">{items}</ul></div>'
        f"{side}</body></html>"
    )


def boxnovel_chapter(n: int) -> str:
    return (
        f"<html><head><title>Chapter {n}</title></head><body>"
        '<div class="nav">prev | next</div>'
        f'<div class="reading-content"><div class="text-left"><p>Body of chapter {n}.</p><br></div></div>'
        "</body></html>"
    )


# --------------------------------------------------------------------------- #
#                                Fake network                                 #
# --------------------------------------------------------------------------- #


class FakeClient:
    """In-memory network collaborator with optional random latency."""

    def __init__(
        self,
        pages: Dict[str, Tuple[int, bytes, str]],
        *,
        jitter: float = 0.0,
        seed: int = 0,
    ) -> None:
        self.pages = pages
        self.jitter = jitter
        self._rng = random.Random(seed)
        self.requested: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get(self, url: str) -> Response:
        self.requested.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._rng.uniform(0, self.jitter) if self.jitter else 0)
            if url not in self.pages:
                raise FetchError(url, "HTTP 404", status=404)
            status, body, ctype = self.pages[url]
            if not 200 <= status < 300:
                raise FetchError(url, f"HTTP {status}", status=status)
            return Response(url, status, {"Content-Type": ctype}, body)
        finally:
            self.in_flight -= 1


def html_page(markup: str) -> Tuple[int, bytes, str]:
    return 200, markup.encode("utf-8"), "text/html; charset=utf-8"


@pytest.fixture()
def site() -> str:
    return SITE


@pytest.fixture()
def novel_pages(site) -> Dict[str, Tuple[int, bytes, str]]:
    """Index + 5 chapters + JPEG cover, keyed by URL."""
    pages = {site: html_page(boxnovel_index(site, 5))}
    for n in range(1, 6):
        pages[f"{site}chapter-{n}/"] = html_page(boxnovel_chapter(n))
    pages["https://boxnovel.com/covers/test.jpg"] = (200, b"\xff\xd8\xff\xe0fakejpeg", "image/jpeg")
    return pages


# --------------------------------------------------------------------------- #
#                               aiohttp server                                #
# --------------------------------------------------------------------------- #


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    tcp = web.TCPSite(runner, "localhost", port)
    await tcp.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
