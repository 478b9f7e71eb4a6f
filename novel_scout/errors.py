# File: novel_scout/errors.py
"""Иерархия исключений NovelScout.

Run-level errors (``FatalSetupError``) abort before any chapter is fetched.
Chapter-level errors are recorded by the scheduler as failure markers and
only become fatal through the collector's failure policy.
"""
from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "NovelScoutError",
    "ConfigError",
    "FatalSetupError",
    "UnsupportedSiteError",
    "FetchError",
    "ChapterFetchError",
    "CoverFetchError",
    "ExtractionError",
    "MissingTitleError",
    "MissingContentError",
    "SanitizeError",
    "ChapterFailedError",
    "IncompleteCollectionError",
]


class NovelScoutError(Exception):
    """Базовое исключение пакета."""


class ConfigError(NovelScoutError):
    """Invalid run parameters (bad base URL, unknown sanitizer, ...)."""


class FatalSetupError(NovelScoutError):
    """Index page cannot be fetched or parsed, or lists no chapters."""


class UnsupportedSiteError(FatalSetupError):
    """No extraction strategy is registered for the requested site."""


class FetchError(NovelScoutError):
    """Network failure or non-success HTTP status."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


class ChapterFetchError(FetchError):
    """Failure retrieving a single chapter page."""


class CoverFetchError(FetchError):
    """Failure retrieving the cover image. Never fatal."""


class ExtractionError(NovelScoutError):
    """A required structural element is absent in a chapter page."""


class MissingTitleError(ExtractionError):
    """Chapter page has no title element."""


class MissingContentError(ExtractionError):
    """Chapter page has no content region."""


class SanitizeError(NovelScoutError):
    """The markup sanitizer failed on a chapter."""


class ChapterFailedError(NovelScoutError):
    """Raised by the collector under the ``abort`` policy."""

    def __init__(self, index: int, url: str, cause: BaseException) -> None:
        self.index = index
        self.url = url
        self.cause = cause
        super().__init__(f"chapter #{index} ({url}) failed: {cause}")


class IncompleteCollectionError(NovelScoutError):
    """The result stream ended while some indices were never delivered."""

    def __init__(self, missing: Sequence[int]) -> None:
        self.missing = list(missing)
        preview = ", ".join(str(i) for i in self.missing[:10])
        if len(self.missing) > 10:
            preview += ", ..."
        super().__init__(f"{len(self.missing)} chapter(s) never completed: {preview}")
