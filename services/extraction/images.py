# services/extraction/images.py
"""
Best-effort image discovery inside one card.

The fallback chain, strongest signal first:

1. the card's first ``<img>`` – browser-resolved ``currentSrc``, the
   resolved ``src`` property, the raw ``src`` attribute, then the
   ``data-src`` / ``data-lazy-src`` lazy-loading conventions;
2. the first ``<source srcset>`` – URL of its first candidate;
3. any descendant styled with ``background-image`` – the computed value
   stamped by the renderer, else the inline declaration.

Every step returns ``""`` instead of raising, so a miss just falls through.
"""

import re
from typing import Optional

from bs4 import Tag

from models.snapshot import (
    RENDERED_BACKGROUND_ATTR,
    RENDERED_CURRENT_SRC_ATTR,
    RENDERED_SRC_ATTR,
)

from .text import normalize_text

IMG_SOURCE_ATTRS = (
    RENDERED_CURRENT_SRC_ATTR,
    RENDERED_SRC_ATTR,
    "src",
    "data-src",
    "data-lazy-src",
)

_CSS_URL_RE = re.compile(r"""url\(\s*['"]?([^'")]*?)['"]?\s*\)""", re.IGNORECASE)


def _attr(el: Tag, name: str) -> str:
    value = el.get(name)
    if isinstance(value, list):  # multi-valued attrs come back as lists
        value = " ".join(value)
    return normalize_text(value)


def image_from_img(card: Tag) -> str:
    img: Optional[Tag] = card.find("img")
    if img is None:
        return ""
    for name in IMG_SOURCE_ATTRS:
        value = _attr(img, name)
        if value:
            return value
    return ""


def first_srcset_candidate(srcset: str) -> str:
    """``"a.jpg 1x, b.jpg 2x"`` → ``"a.jpg"``."""
    first_entry = srcset.split(",", 1)[0].strip()
    if not first_entry:
        return ""
    return first_entry.split()[0]


def image_from_srcset(card: Tag) -> str:
    source = card.select_one("source[srcset]")
    if source is None:
        return ""
    return first_srcset_candidate(_attr(source, "srcset"))


def css_url(value: str) -> str:
    """Pull the target out of ``url(...)``, dropping optional quotes."""
    match = _CSS_URL_RE.search(value or "")
    return match.group(1).strip() if match else ""


def image_from_background(card: Tag) -> str:
    for el in card.select('[style*="background-image"]'):
        computed = css_url(_attr(el, RENDERED_BACKGROUND_ATTR))
        if computed:
            return computed
        inline = css_url(_attr(el, "style"))
        if inline:
            return inline
    return ""


def resolve_image(card: Tag) -> str:
    """Return the first non-empty image URL found by the chain above, else ``""``."""
    return (
        image_from_img(card)
        or image_from_srcset(card)
        or image_from_background(card)
        or ""
    )
