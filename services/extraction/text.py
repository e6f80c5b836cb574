# services/extraction/text.py
"""Whitespace normalisation and href resolution shared by every stage."""

import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(value: Optional[str]) -> str:
    """Collapse whitespace runs to one space and trim; ``None`` → ``""``."""
    if value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()


def absolute_url(href: Optional[str], origin: str) -> str:
    """
    Resolve ``href`` against a fixed site ``origin`` (``scheme://host``).

    * ``http(s)://…`` – returned unchanged
    * ``//host/…``    – gets an ``https:`` scheme
    * ``/path``       – prefixed with ``origin``
    * anything else   – returned unchanged (``mailto:``, ``#frag``, ``page.html``…)
    """
    if not href:
        return ""
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    if href.startswith("/"):
        return f"{origin.rstrip('/')}{href}"
    return href
