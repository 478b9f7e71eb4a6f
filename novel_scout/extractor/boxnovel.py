# File: novel_scout/extractor/boxnovel.py
"""Стратегия для сайтов на теме Madara (boxnovel и клоны).

Оглавление перечисляет главы от новых к старым, поэтому список ссылок
разворачивается.
"""
from __future__ import annotations

from typing import Final

from novel_scout.extractor.base import (
    NO_AUTHOR,
    NO_TITLE,
    build_chapter,
    collect_chapter_links,
    first_text,
    image_source,
    last_text,
    parse,
)
from novel_scout.extractor.registry import register
from novel_scout.models import Chapter, Overview

TITLE_SELECTOR: Final = "ol.breadcrumb li a"
AUTHOR_SELECTOR: Final = "div.author-content a"
COVER_SELECTOR: Final = "div.summary_image img"
CHAPTER_LIST_SELECTOR: Final = "li.wp-manga-chapter, .listing-chapters_wrap"
CHAPTER_TITLE_SELECTOR: Final = "title"
CONTENT_SELECTOR: Final = "div.text-left"


@register("boxnovel", hosts=("boxnovel.com", "boxnovel.org"))
class BoxNovelExtractor:
    """Madara layout: breadcrumb title, ``author-content`` block, ``div.text-left`` body."""

    newest_first = True

    def __init__(self, site: str) -> None:
        self.site = site

    def extract_overview(self, html: str) -> Overview:
        soup = parse(html)
        # breadcrumb is Home > Genre > Novel; the novel is the last crumb
        title = last_text(soup, TITLE_SELECTOR, NO_TITLE)
        author = first_text(soup, AUTHOR_SELECTOR, NO_AUTHOR)
        cover_url = image_source(soup, COVER_SELECTOR, self.site)
        chapter_urls = collect_chapter_links(
            soup, self.site, CHAPTER_LIST_SELECTOR, newest_first=self.newest_first
        )
        return Overview(
            title=title,
            author=author,
            cover_url=cover_url,
            chapter_urls=tuple(chapter_urls),
        )

    def extract_chapter(self, html: str) -> Chapter:
        return build_chapter(html, CHAPTER_TITLE_SELECTOR, CONTENT_SELECTOR)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.site!r})"
