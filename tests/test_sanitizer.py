# File: tests/test_sanitizer.py
from __future__ import annotations

import pytest

from novel_scout.errors import SanitizeError
from novel_scout.extractor.base import render_chapter
from novel_scout.sanitizer import PrettierSanitizer, SoupSanitizer, get_sanitizer


@pytest.mark.asyncio()
async def test_soup_sanitizer_closes_void_elements():
    doc = render_chapter("Chapter 1", "<p>one<br>two</p><img src='a.png'><p>x&nbsp;y</p>")
    out = await SoupSanitizer().normalize(doc)

    assert "<br/>" in out
    assert '<img src="a.png"/>' in out
    assert "<p>x\xa0y</p>" in out
    assert "&nbsp;" not in out
    assert 'xmlns:epub="http://www.idpf.org/2007/ops"' in out


@pytest.mark.asyncio()
async def test_prettier_missing_binary_is_sanitize_error():
    sanitizer = PrettierSanitizer(command=("novel-scout-no-such-binary", "--parser", "html"))
    with pytest.raises(SanitizeError):
        await sanitizer.normalize("<p>x</p>")


@pytest.mark.asyncio()
async def test_prettier_nonzero_exit_is_sanitize_error():
    sanitizer = PrettierSanitizer(command=("false",))
    with pytest.raises(SanitizeError):
        await sanitizer.normalize("<p>x</p>")


@pytest.mark.asyncio()
async def test_prettier_output_entities_fixed():
    # `cat` echoes stdin, standing in for prettier
    out = await PrettierSanitizer(command=("cat",)).normalize("<p>a&nbsp;b</p>")
    assert out == "<p>a&#160;b</p>"


def test_get_sanitizer():
    assert isinstance(get_sanitizer("soup"), SoupSanitizer)
    assert isinstance(get_sanitizer("prettier"), PrettierSanitizer)
    with pytest.raises(ValueError):
        get_sanitizer("tidy")
