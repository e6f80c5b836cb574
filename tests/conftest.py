# tests/conftest.py
"""
HTML builders shared by the extraction and pipeline tests.

The markup imitates a CMS carousel: a section heading in its own wrapper,
then a list of ``<li>`` cards, each with a category label, a linked
``<h3>`` title, a blurb and (optionally) a lazy-loaded image.
"""

import pytest

from services.pipeline.config_loader import TargetConfig

ORIGIN = "https://example.org"
SOURCE_URL = f"{ORIGIN}/locations/st-george"
HEADING = "You might be interested in"
BLURB = "Learn how our cardiology team helps patients get back on their feet after surgery."


def _card(
    idx: int,
    href: str | None = None,
    title: str | None = None,
    category: str = "Heart Care",
    blurb: str = BLURB,
    image: str | None = "default",
) -> str:
    href = href if href is not None else f"/articles/{idx}"
    title = title if title is not None else f"Article {idx} title"
    if image == "default":
        image = f'<img data-src="/img/{idx}.jpg" alt="">'
    return (
        '<li class="card">'
        f"{image or ''}"
        f'<span class="tag">{category}</span>'
        f'<a href="{href}"><h3>{title}</h3></a>'
        f"<p>{blurb}</p>"
        "</li>"
    )


def _page(cards, heading: str = HEADING) -> str:
    heading_html = f'<div class="heading-wrap"><h2>{heading}</h2></div>' if heading else ""
    return (
        "<html><head><title>St. George</title></head><body>"
        '<header><nav><a href="/">Home</a><a href="/find-a-doctor">Find a doctor</a></nav></header>'
        "<main>"
        '<section class="intro"><h1>St. George Regional Hospital</h1>'
        "<p>Serving southern Utah.</p></section>"
        '<section class="related">'
        f"{heading_html}"
        f'<div class="carousel"><ul>{"".join(cards)}</ul></div>'
        "</section>"
        "</main></body></html>"
    )


@pytest.fixture
def make_card():
    return _card


@pytest.fixture
def make_page():
    return _page


@pytest.fixture
def ten_card_page():
    """Ten candidates; card 5 repeats card 2's href."""
    cards = [
        _card(i, href="/articles/2" if i == 5 else None) for i in range(10)
    ]
    return _page(cards)


@pytest.fixture
def target():
    return TargetConfig(source_url=SOURCE_URL, heading=HEADING)
