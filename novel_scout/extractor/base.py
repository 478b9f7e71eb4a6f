# File: novel_scout/extractor/base.py
"""
Extraction capability set and the helpers site strategies share.

A strategy is any object with ``extract_overview(html) -> Overview`` and
``extract_chapter(html) -> Chapter``. Strategies do not subclass anything;
they are matched structurally by :class:`Extractor`.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup
from bs4.element import Tag
from jinja2 import Environment, StrictUndefined

from novel_scout.errors import MissingContentError, MissingTitleError
from novel_scout.models import Chapter, Overview
from novel_scout.utils import absolute_url, remove_duplicates

__all__ = [
    "Extractor",
    "NO_TITLE",
    "NO_AUTHOR",
    "parse",
    "first_text",
    "last_text",
    "image_source",
    "collect_chapter_links",
    "build_chapter",
    "render_chapter",
]

NO_TITLE = "no_title"
NO_AUTHOR = "no_author"

HTML_PARSER = "html.parser"

# Rendered once per chapter; only the title and the body fragment vary.
_CHAPTER_SHELL = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=False).from_string(
    """<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">
    <head>
        <title>{{ title | e }}</title>
    </head>
    <body>
        {{ body }}
    </body>
</html>"""
)


@runtime_checkable
class Extractor(Protocol):
    """Per-site parser turning raw markup into structured data."""

    site: str

    def extract_overview(self, html: str) -> Overview:
        ...

    def extract_chapter(self, html: str) -> Chapter:
        ...


# --------------------------------------------------------------------------- #
#                               Parsing helpers                               #
# --------------------------------------------------------------------------- #


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, HTML_PARSER)


def _clean(text: str) -> str:
    return " ".join(text.split())


def first_text(soup: BeautifulSoup, selector: str, default: str) -> str:
    """Text of the first element matching *selector*, or *default* if absent/empty."""
    node = soup.select_one(selector)
    text = _clean(node.get_text(" ")) if node is not None else ""
    return text or default


def last_text(soup: BeautifulSoup, selector: str, default: str) -> str:
    """Like :func:`first_text` but takes the last match (breadcrumb tails)."""
    nodes = soup.select(selector)
    text = _clean(nodes[-1].get_text(" ")) if nodes else ""
    return text or default


def image_source(soup: BeautifulSoup, selector: str, site: str) -> Optional[str]:
    """Absolute URL of the first matching ``<img>``; lazy-loading attributes win over ``src``."""
    img = soup.select_one(selector)
    if img is None:
        return None
    for attr in ("data-src", "data-lazy-src", "src"):
        value = img.get(attr)
        if isinstance(value, str) and value.strip():
            return absolute_url(site, value)
    return None


def _prefixed_links(anchors: Iterable[Tag], site: str) -> List[str]:
    links: List[str] = []
    for a in anchors:
        href = a.get("href")
        if not isinstance(href, str):
            continue
        url = absolute_url(site, href)
        # the index page itself shares the prefix but is not a chapter
        if url.startswith(site) and len(url) > len(site):
            links.append(url)
    return links


def collect_chapter_links(
    soup: BeautifulSoup,
    site: str,
    region_selector: str,
    *,
    newest_first: bool,
) -> List[str]:
    """
    Collect chapter URLs in reading order (oldest first).

    Links are taken from *region_selector* when the page has that region;
    otherwise every anchor in the document whose URL is prefixed by *site*
    is used. The whole-document scan can pick up sidebar links to the same
    novel, so it is only a fallback.
    """
    regions = soup.select(region_selector)
    if regions:
        anchors: List[Tag] = [a for region in regions for a in region.find_all("a", href=True)]
    else:
        anchors = soup.find_all("a", href=True)
    links = remove_duplicates(_prefixed_links(anchors, site))
    if newest_first:
        links.reverse()
    return links


# --------------------------------------------------------------------------- #
#                               Chapter helpers                               #
# --------------------------------------------------------------------------- #


def render_chapter(title: str, body: str) -> str:
    """Wrap *body* in the fixed XHTML document shell."""
    return _CHAPTER_SHELL.render(title=title, body=body)


def build_chapter(html: str, title_selector: str, content_selector: str) -> Chapter:
    """Shared chapter logic: title element + content region -> Chapter."""
    soup = parse(html)
    title_el = soup.select_one(title_selector)
    if title_el is None:
        raise MissingTitleError(f"No {title_selector!r} element found")
    title = _clean(title_el.get_text(" "))

    content_el = soup.select_one(content_selector)
    if content_el is None:
        raise MissingContentError(f"No chapter content found ({content_selector!r})")

    inner = "".join(str(child) for child in content_el.contents)
    return Chapter(title=title, content=render_chapter(title, inner))
