# File: tests/test_scheduler.py
"""Bounded-concurrency scheduler: ordering, limits and per-chapter failures."""
from __future__ import annotations

import asyncio

import pytest
from conftest import SITE, FakeClient, boxnovel_chapter, html_page

from novel_scout.collector import OrderedCollector
from novel_scout.crawler.scheduler import FetchScheduler
from novel_scout.errors import ChapterFetchError, MissingContentError, SanitizeError
from novel_scout.extractor import BoxNovelExtractor
from novel_scout.models import Chapter


def chapter_urls(n: int) -> list[str]:
    return [f"{SITE}chapter-{i}/" for i in range(1, n + 1)]


def pages_for(urls) -> dict:
    return {url: html_page(boxnovel_chapter(i)) for i, url in enumerate(urls, start=1)}


class UpperSanitizer:
    async def normalize(self, markup: str) -> str:
        await asyncio.sleep(0)
        return markup.upper()


class BrokenSanitizer:
    async def normalize(self, markup: str) -> str:
        raise SanitizeError("boom")


async def drain(scheduler: FetchScheduler, urls):
    return [r async for r in scheduler.run(urls)]


@pytest.mark.asyncio()
@pytest.mark.parametrize("n,k", [(1, 1), (5, 1), (5, 2), (12, 3), (20, 8), (7, 7)])
async def test_every_url_yields_one_result(n, k):
    urls = chapter_urls(n)
    client = FakeClient(pages_for(urls), jitter=0.01, seed=n * 31 + k)
    scheduler = FetchScheduler(client, BoxNovelExtractor(SITE), concurrency=k)

    results = await drain(scheduler, urls)

    assert sorted(r.index for r in results) == list(range(n))
    assert all(r.ok for r in results)
    for r in results:
        assert r.url == urls[r.index]
        assert r.outcome.title == f"Chapter {r.index + 1}"
    assert client.max_in_flight <= k


@pytest.mark.asyncio()
@pytest.mark.parametrize("seed", range(6))
async def test_scheduler_plus_collector_restores_order_under_jitter(seed):
    n, k = 15, 4
    urls = chapter_urls(n)
    client = FakeClient(pages_for(urls), jitter=0.02, seed=seed)
    scheduler = FetchScheduler(client, BoxNovelExtractor(SITE), concurrency=k)
    collector = OrderedCollector(n)

    out = [(i, ch.title) async for i, ch in collector.collect(scheduler.run(urls))]

    assert out == [(i, f"Chapter {i + 1}") for i in range(n)]


@pytest.mark.asyncio()
async def test_submission_follows_index_order():
    urls = chapter_urls(6)
    client = FakeClient(pages_for(urls))
    await drain(FetchScheduler(client, BoxNovelExtractor(SITE), concurrency=1), urls)
    assert client.requested == urls


@pytest.mark.asyncio()
async def test_completion_order_is_not_index_order():
    urls = chapter_urls(2)

    class SlowFirst(FakeClient):
        async def get(self, url):
            if url == urls[0]:
                await asyncio.sleep(0.05)
            return await super().get(url)

    client = SlowFirst(pages_for(urls))
    results = await drain(FetchScheduler(client, BoxNovelExtractor(SITE), concurrency=2), urls)
    assert [r.index for r in results] == [1, 0]


@pytest.mark.asyncio()
async def test_failures_are_isolated():
    urls = chapter_urls(4)
    pages = pages_for(urls)
    pages[urls[1]] = (503, b"", "text/html")
    pages[urls[2]] = html_page("<title>Broken</title><p>no content region</p>")
    client = FakeClient(pages)

    results = {r.index: r for r in await drain(FetchScheduler(client, BoxNovelExtractor(SITE), concurrency=2), urls)}

    assert results[0].ok and results[3].ok
    assert isinstance(results[1].outcome.error, ChapterFetchError)
    assert results[1].outcome.error.status == 503
    assert isinstance(results[2].outcome.error, MissingContentError)


@pytest.mark.asyncio()
async def test_sanitizer_applied_and_failures_recorded():
    urls = chapter_urls(2)
    client = FakeClient(pages_for(urls))

    results = await drain(FetchScheduler(client, BoxNovelExtractor(SITE), UpperSanitizer(), concurrency=2), urls)
    assert all(isinstance(r.outcome, Chapter) and "BODY OF CHAPTER" in r.outcome.content for r in results)
    # title is not touched by the sanitizer
    assert {r.outcome.title for r in results} == {"Chapter 1", "Chapter 2"}

    results = await drain(FetchScheduler(client, BoxNovelExtractor(SITE), BrokenSanitizer(), concurrency=2), urls)
    assert all(isinstance(r.outcome.error, SanitizeError) for r in results)


@pytest.mark.asyncio()
async def test_early_stop_cancels_workers():
    urls = chapter_urls(10)
    client = FakeClient(pages_for(urls), jitter=0.01)
    scheduler = FetchScheduler(client, BoxNovelExtractor(SITE), concurrency=2)

    gen = scheduler.run(urls)
    first = await gen.__anext__()
    await gen.aclose()

    assert first.index in range(10)
    await asyncio.sleep(0.05)
    assert client.in_flight == 0
    assert len(client.requested) < 10


@pytest.mark.asyncio()
async def test_empty_url_list():
    scheduler = FetchScheduler(FakeClient({}), BoxNovelExtractor(SITE), concurrency=3)
    assert await drain(scheduler, []) == []


def test_concurrency_must_be_positive():
    with pytest.raises(ValueError):
        FetchScheduler(FakeClient({}), BoxNovelExtractor(SITE), concurrency=0)
