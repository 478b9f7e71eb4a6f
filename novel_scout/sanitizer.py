# File: novel_scout/sanitizer.py
"""
Chapter markup normalizers.

EPUB readers want well-formed XHTML (``<br/>`` rather than ``<br>``), while
chapter pages are tag-soup HTML. A sanitizer takes the chapter document
built by an extractor and returns an equivalent well-formed one.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Protocol, Sequence, Type

from bs4 import BeautifulSoup

from novel_scout.errors import SanitizeError
from novel_scout.logger import logger

__all__ = ["Sanitizer", "SoupSanitizer", "PrettierSanitizer", "get_sanitizer"]


class Sanitizer(Protocol):
    async def normalize(self, markup: str) -> str:
        ...


def _fix_entities(markup: str) -> str:
    # XHTML has no named &nbsp; entity
    return markup.replace("&nbsp;", "&#160;")


class SoupSanitizer:
    """Re-serializes the document through BeautifulSoup in a worker thread."""

    parser = "html.parser"

    def _normalize_sync(self, markup: str) -> str:
        soup = BeautifulSoup(markup, self.parser)
        # "minimal" writes U+00A0 as a literal character, never as a named entity
        return soup.decode(formatter="minimal")

    async def normalize(self, markup: str) -> str:
        try:
            return await asyncio.to_thread(self._normalize_sync, markup)
        except Exception as exc:
            raise SanitizeError(f"BeautifulSoup failed: {exc}") from exc


class PrettierSanitizer:
    """
    Pipes the document through ``npx prettier --parser html``.

    Slow (one Node process per chapter) but produces tidy output; needs
    Node.js and prettier on PATH.
    """

    def __init__(self, command: Sequence[str] = ("npx", "prettier", "--parser", "html")) -> None:
        self.command = tuple(command)

    async def normalize(self, markup: str) -> str:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SanitizeError(f"Couldn't start {self.command[0]}: {exc}") from exc

        stdout, stderr = await proc.communicate(markup.encode("utf-8"))
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip().splitlines()
            raise SanitizeError(
                f"{' '.join(self.command)} exited with {proc.returncode}: {detail[-1] if detail else 'no output'}"
            )
        try:
            text = stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SanitizeError(f"prettier produced invalid UTF-8: {exc}") from exc
        return _fix_entities(text)


_SANITIZERS: Dict[str, Type] = {
    "soup": SoupSanitizer,
    "prettier": PrettierSanitizer,
}


def get_sanitizer(name: str) -> Sanitizer:
    try:
        cls = _SANITIZERS[name]
    except KeyError:
        raise ValueError(f"Unknown sanitizer {name!r}; choose from {', '.join(sorted(_SANITIZERS))}") from None
    logger.debug("Using %s sanitizer", name)
    return cls()
