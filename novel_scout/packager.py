# File: novel_scout/packager.py
"""novel_scout.packager: EPUB assembly with EbookLib.

Receives metadata once, then chapters one at a time in final reading order,
then writes the book to a destination path.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from ebooklib import epub

from novel_scout.logger import logger
from novel_scout.models import Chapter

__all__ = ["EpubPackager", "COVER_FILENAMES"]

# Mimetypes accepted for the cover and the file name each is stored under.
COVER_FILENAMES: Dict[str, str] = {
    "image/png": "cover.png",
    "image/jpeg": "cover.jpg",
}

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _identifier(title: str, author: str) -> str:
    slug = _SLUG_RE.sub("-", f"{title} {author}".lower()).strip("-")
    return f"novel-scout-{slug or 'book'}"


class EpubPackager:
    """Тонкая обёртка над ``ebooklib.epub.EpubBook``."""

    def __init__(self, *, language: str = "en", identifier: Optional[str] = None) -> None:
        self.language = language
        self.identifier = identifier
        self.book = epub.EpubBook()
        self.book.set_language(language)
        self.chapters: List[epub.EpubHtml] = []
        self.cover_embedded = False
        self._has_metadata = False

    def set_metadata(self, title: str, author: str) -> None:
        self.book.set_identifier(self.identifier or _identifier(title, author))
        self.book.set_title(title)
        self.book.add_author(author)
        self._has_metadata = True

    def set_cover(self, data: bytes, mimetype: str) -> bool:
        """Embed a PNG/JPEG cover. Other mimetypes are logged and skipped."""
        mimetype = mimetype.split(";", 1)[0].strip().lower()
        file_name = COVER_FILENAMES.get(mimetype)
        if file_name is None:
            logger.warning("Cover photo mimetype not supported: %s", mimetype or "<none>")
            return False
        self.book.set_cover(file_name, data)
        self.cover_embedded = True
        return True

    def add_chapter(self, index: int, chapter: Chapter, *, first: bool = False) -> epub.EpubHtml:
        uid = f"c{index}"
        item = epub.EpubHtml(uid=uid, title=chapter.title, file_name=f"{uid}.xhtml", lang=self.language)
        item.content = chapter.content
        self.book.add_item(item)
        if first:
            # start-of-text reference used by readers for the opening page
            self.book.guide.append({"type": "text", "title": chapter.title, "href": item.file_name})
        self.chapters.append(item)
        return item

    def write(self, destination: Union[str, Path]) -> Path:
        if not self._has_metadata:
            raise RuntimeError("set_metadata() must be called before write()")
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)

        self.book.toc = list(self.chapters)
        self.book.add_item(epub.EpubNcx())
        self.book.add_item(epub.EpubNav())
        # inline table of contents before the first chapter
        self.book.spine = ["nav", *self.chapters]

        epub.write_epub(str(path), self.book)
        logger.info("EPUB written to %s (%d chapters)", path, len(self.chapters))
        return path
