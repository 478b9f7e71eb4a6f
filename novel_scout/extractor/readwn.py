# File: novel_scout/extractor/readwn.py
"""ReadWN-style layout (readwn.com, wuxiap.com, ...). Chapters are listed oldest first."""
from __future__ import annotations

from typing import Final

from novel_scout.extractor.base import (
    NO_AUTHOR,
    NO_TITLE,
    build_chapter,
    collect_chapter_links,
    first_text,
    image_source,
    parse,
)
from novel_scout.extractor.registry import register
from novel_scout.models import Chapter, Overview

TITLE_SELECTOR: Final = "h1.novel-title"
AUTHOR_SELECTOR: Final = "div.author span[itemprop=author]"
COVER_SELECTOR: Final = "figure.cover img"
CHAPTER_LIST_SELECTOR: Final = "ul.chapter-list"
CHAPTER_TITLE_SELECTOR: Final = "span.chapter-title"
CONTENT_SELECTOR: Final = "div.chapter-content"


@register("readwn", hosts=("readwn.com", "wuxiap.com", "fansmtl.com"))
class ReadWnExtractor:
    newest_first = False

    def __init__(self, site: str) -> None:
        self.site = site

    def extract_overview(self, html: str) -> Overview:
        soup = parse(html)
        return Overview(
            title=first_text(soup, TITLE_SELECTOR, NO_TITLE),
            author=first_text(soup, AUTHOR_SELECTOR, NO_AUTHOR),
            cover_url=image_source(soup, COVER_SELECTOR, self.site),
            chapter_urls=tuple(
                collect_chapter_links(soup, self.site, CHAPTER_LIST_SELECTOR, newest_first=self.newest_first)
            ),
        )

    def extract_chapter(self, html: str) -> Chapter:
        # the page <title> carries the site name as well, the header span does not
        return build_chapter(html, CHAPTER_TITLE_SELECTOR, CONTENT_SELECTOR)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.site!r})"
