# === FILE: novel_scout/crawler/scheduler.py ===
"""
Bounded-concurrency chapter downloader.

K workers pull ``(index, url)`` pairs from a queue filled in index order,
run fetch -> extract -> sanitize for each, and push an IndexedResult onto a
completion queue. Results come out in completion order; putting them back
in reading order is the collector's job.
"""
from __future__ import annotations

import asyncio
import time
from typing import AsyncIterator, List, Optional, Protocol, Sequence, Tuple

from novel_scout.crawler.fetcher import Response
from novel_scout.errors import ChapterFetchError, FetchError, NovelScoutError
from novel_scout.extractor import Extractor
from novel_scout.logger import logger
from novel_scout.models import Chapter, ChapterFailure, IndexedResult
from novel_scout.sanitizer import Sanitizer
from novel_scout.utils import default_concurrency

__all__ = ("FetchScheduler", "Client")


class Client(Protocol):
    async def get(self, url: str) -> Response:
        ...


_Job = Tuple[int, str]


class FetchScheduler:
    """Асинхронный загрузчик глав с ограничением параллелизма."""

    def __init__(
        self,
        client: Client,
        extractor: Extractor,
        sanitizer: Optional[Sanitizer] = None,
        *,
        concurrency: Optional[int] = None,
    ) -> None:
        if concurrency is None:
            concurrency = default_concurrency()
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.extractor = extractor
        self.sanitizer = sanitizer
        self.concurrency = concurrency
        self._slots = asyncio.Semaphore(concurrency)

    async def run(self, urls: Sequence[str]) -> AsyncIterator[IndexedResult]:
        """Yield one IndexedResult per URL, in completion order."""
        total = len(urls)
        if total == 0:
            return
        logger.info("Downloading %d chapters (concurrency %d)", total, self.concurrency)
        start = time.monotonic()

        jobs: asyncio.Queue[_Job] = asyncio.Queue()
        for job in enumerate(urls):
            jobs.put_nowait(job)
        done: asyncio.Queue[IndexedResult] = asyncio.Queue()

        workers: List[asyncio.Task] = [
            asyncio.create_task(self._worker(jobs, done), name=f"chapter-worker-{n}")
            for n in range(min(self.concurrency, total))
        ]
        failed = 0
        try:
            for _ in range(total):
                result = await done.get()
                if not result.ok:
                    failed += 1
                yield result
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        duration = time.monotonic() - start
        logger.info("Downloaded %d/%d chapters in %.2f s", total - failed, total, duration)

    async def _worker(self, jobs: asyncio.Queue[_Job], done: asyncio.Queue[IndexedResult]) -> None:
        while True:
            try:
                index, url = jobs.get_nowait()
            except asyncio.QueueEmpty:
                return
            async with self._slots:
                outcome = await self._process(index, url)
            done.put_nowait(IndexedResult(index, url, outcome))

    async def _process(self, index: int, url: str) -> Chapter | ChapterFailure:
        logger.info("Downloading %s", url)
        try:
            try:
                response = await self.client.get(url)
            except FetchError as exc:
                raise ChapterFetchError(url, exc.reason, exc.status) from exc
            chapter = self.extractor.extract_chapter(response.text())
            if self.sanitizer is not None:
                content = await self.sanitizer.normalize(chapter.content)
                chapter = Chapter(chapter.title, content)
        except NovelScoutError as exc:
            logger.warning("Chapter #%d failed (%s): %s", index, url, exc)
            return ChapterFailure(url, exc)
        except Exception as exc:
            logger.exception("Chapter #%d: unexpected error for %s", index, url)
            return ChapterFailure(url, NovelScoutError(f"unexpected {type(exc).__name__}: {exc}"))
        return chapter
