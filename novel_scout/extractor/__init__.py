# File: novel_scout/extractor/__init__.py
"""novel_scout.extractor: per-site extraction strategies and their registry."""

from novel_scout.extractor.base import NO_AUTHOR, NO_TITLE, Extractor
from novel_scout.extractor.registry import SiteEntry, available_sites, get_extractor, register

# importing the strategy modules registers them
from novel_scout.extractor.boxnovel import BoxNovelExtractor
from novel_scout.extractor.readwn import ReadWnExtractor

__all__ = [
    "Extractor",
    "NO_TITLE",
    "NO_AUTHOR",
    "SiteEntry",
    "register",
    "get_extractor",
    "available_sites",
    "BoxNovelExtractor",
    "ReadWnExtractor",
]
