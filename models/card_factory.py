# models/card_factory.py
from __future__ import annotations

from typing import Any, Mapping

from services.extraction.text import absolute_url, normalize_text

from .card import CardRecord

_TEXT_FIELDS = ("title", "category", "description")
_URL_FIELDS = ("url", "image_url")


def card_from_mapping(data: Mapping[str, Any], origin: str) -> CardRecord:
    """
    Build a :class:`models.card.CardRecord` from a raw extraction mapping.

    The function:
    • Accepts either attribute names (``image_url``) or published aliases
      (``imageUrl``) and ignores any other key.
    • Whitespace-normalises the text fields.
    • Resolves ``url`` / ``image_url`` to absolute URLs against ``origin``.

    Example
    -------
    >>> raw = {"title": "  Heart\\n care ", "url": "/heart", "extra": 42}
    >>> card = card_from_mapping(raw, "https://example.org")
    >>> card.url
    'https://example.org/heart'
    """
    fields = {}
    for name, info in CardRecord.model_fields.items():
        if name in data:
            fields[name] = data[name]
        elif info.alias and info.alias in data:
            fields[name] = data[info.alias]

    for name in _TEXT_FIELDS:
        fields[name] = normalize_text(fields.get(name))
    for name in _URL_FIELDS:
        fields[name] = absolute_url(normalize_text(fields.get(name)), origin)

    return CardRecord(**fields)
