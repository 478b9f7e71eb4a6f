# File: novel_scout/models.py
"""
Data models shared by extractors, the scheduler, the collector and the engine.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from novel_scout.errors import NovelScoutError

__all__ = ("Overview", "Chapter", "ChapterFailure", "IndexedResult", "BuildReport")


@dataclass(frozen=True, slots=True)
class Overview:
    """Metadata of the index page; ``chapter_urls`` is oldest-first."""

    title: str
    author: str
    cover_url: Optional[str]
    chapter_urls: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Chapter:
    """Title and a self-contained XHTML document for one chapter."""

    title: str
    content: str


@dataclass(frozen=True, slots=True)
class ChapterFailure:
    """Failure marker standing in place of a Chapter."""

    url: str
    error: NovelScoutError


@dataclass(frozen=True, slots=True)
class IndexedResult:
    index: int
    url: str
    outcome: Union[Chapter, ChapterFailure]

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Chapter)


@dataclass(slots=True)
class BuildReport:
    """Итог одного запуска: что записано и что пропущено."""

    title: str
    author: str
    output: Path
    chapters_written: int = 0
    skipped: List[int] = field(default_factory=list)
    cover_embedded: bool = False

    def json(self, *, pretty: bool = False) -> str:
        data = asdict(self)
        data["output"] = str(self.output)
        return json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)
