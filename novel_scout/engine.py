# File: novel_scout/engine.py
"""novel_scout.engine: index page → overview → chapters → EPUB."""

from __future__ import annotations

import asyncio
from typing import Optional

from novel_scout.collector import OrderedCollector
from novel_scout.config import BuildConfig
from novel_scout.crawler.fetcher import HttpClient, Response
from novel_scout.crawler.scheduler import Client, FetchScheduler
from novel_scout.errors import CoverFetchError, FatalSetupError, FetchError, NovelScoutError
from novel_scout.extractor import Extractor, get_extractor
from novel_scout.logger import logger
from novel_scout.models import BuildReport, Overview
from novel_scout.packager import EpubPackager
from novel_scout.sanitizer import Sanitizer, get_sanitizer

__all__ = ["Engine", "build_book", "fetch_overview"]


async def fetch_overview(client: Client, extractor: Extractor, base_url: str) -> Overview:
    """Download and parse the index page; any failure here aborts the run."""
    logger.info("Fetching index page %s", base_url)
    try:
        response = await client.get(base_url)
    except FetchError as exc:
        raise FatalSetupError(f"Cannot retrieve index page {base_url}: {exc.reason}") from exc
    try:
        overview = extractor.extract_overview(response.text())
    except NovelScoutError:
        raise
    except Exception as exc:
        raise FatalSetupError(f"Cannot parse index page {base_url}: {exc}") from exc
    if not overview.chapter_urls:
        raise FatalSetupError(f"No chapter links found on {base_url}")
    logger.info(
        "«%s» by %s: %d chapters", overview.title, overview.author, len(overview.chapter_urls)
    )
    return overview


async def _fetch_cover(client: Client, cover_url: str) -> Response:
    try:
        return await client.get(cover_url)
    except FetchError as exc:
        raise CoverFetchError(cover_url, exc.reason, exc.status) from exc


async def _embed_cover(client: Client, packager: EpubPackager, cover_url: Optional[str]) -> None:
    if not cover_url:
        return
    try:
        response = await _fetch_cover(client, cover_url)
    except CoverFetchError as exc:
        logger.warning("Proceeding without a cover: %s", exc)
        return
    packager.set_cover(response.body, response.content_type)


async def build_book(
    config: BuildConfig,
    *,
    client: Optional[Client] = None,
    sanitizer: Optional[Sanitizer] = None,
    packager: Optional[EpubPackager] = None,
) -> BuildReport:
    """
    Run the whole pipeline for *config* and return a BuildReport.

    *client*, *sanitizer* and *packager* default to HttpClient, the
    configured sanitizer and EpubPackager. A client passed in is used as is;
    the default one is opened and closed here.
    """
    extractor = get_extractor(config.base_url, config.site)
    if sanitizer is None:
        sanitizer = get_sanitizer(config.sanitizer)
    if packager is None:
        packager = EpubPackager(language=config.language)

    if client is None:
        async with HttpClient.from_config(config) as http:
            return await _build(config, http, extractor, sanitizer, packager)
    return await _build(config, client, extractor, sanitizer, packager)


async def _build(
    config: BuildConfig,
    client: Client,
    extractor: Extractor,
    sanitizer: Sanitizer,
    packager: EpubPackager,
) -> BuildReport:
    overview = await fetch_overview(client, extractor, config.base_url)

    packager.set_metadata(overview.title, overview.author)
    await _embed_cover(client, packager, overview.cover_url)

    scheduler = FetchScheduler(client, extractor, sanitizer, concurrency=config.concurrency)
    collector = OrderedCollector(len(overview.chapter_urls), config.failure_policy)

    written = 0
    async for index, chapter in collector.collect(scheduler.run(overview.chapter_urls)):
        packager.add_chapter(index, chapter, first=written == 0)
        written += 1

    if written == 0:
        raise NovelScoutError("Every chapter failed; nothing to write")

    output = packager.write(config.output)
    report = BuildReport(
        title=overview.title,
        author=overview.author,
        output=output,
        chapters_written=written,
        skipped=collector.skipped,
        cover_embedded=packager.cover_embedded,
    )
    if report.skipped:
        logger.warning("Book written with %d missing chapter(s): %s", len(report.skipped), report.skipped)
    return report


class Engine:
    """Синхронный фасад над build_book для вызова вне event loop."""

    def __init__(self, config: BuildConfig) -> None:
        self.config = config

    def run(self) -> BuildReport:
        """Запускает асинхронную сборку и возвращает отчёт."""
        logger.info("Starting build of %s", self.config.base_url)
        try:
            return asyncio.run(build_book(self.config))
        except NovelScoutError as exc:
            logger.error("Build failed: %s", exc)
            raise
