# tests/test_text.py
import pytest

from services.extraction.text import absolute_url, normalize_text

ORIGIN = "https://example.org"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("  Heart \n\t care  ", "Heart care"),
        ("already clean", "already clean"),
        ("\u00a0non\u00a0breaking\u00a0", "non breaking"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


@pytest.mark.parametrize(
    "href,expected",
    [
        ("/a/b", "https://example.org/a/b"),
        ("//cdn.example.org/x.jpg", "https://cdn.example.org/x.jpg"),
        ("https://x.com/y", "https://x.com/y"),
        ("http://x.com/y", "http://x.com/y"),
        ("relative/page.html", "relative/page.html"),
        ("mailto:someone@example.org", "mailto:someone@example.org"),
        ("", ""),
        (None, ""),
    ],
)
def test_absolute_url(href, expected):
    assert absolute_url(href, ORIGIN) == expected


def test_absolute_url_ignores_trailing_slash_on_origin():
    assert absolute_url("/a", "https://example.org/") == "https://example.org/a"
