# services/extraction/classifier.py
from typing import Iterable, NamedTuple, Optional

from models.limits import DEFAULT_LIMITS, ExtractionLimits


class TextClassification(NamedTuple):
    category: str
    description: str


def classify_text(
    fragments: Iterable[str],
    limits: Optional[ExtractionLimits] = None,
) -> TextClassification:
    """
    Split a card's leftover text into a short label and a long sentence.

    ``category`` is the first fragment whose length lies in
    ``[category_min_length, category_max_length]``; ``description`` is the
    first fragment at least ``description_min_length`` long.  Both are
    first-match in the given order, and the category band is checked first,
    so one fragment may fill both slots when the bands overlap.
    """
    limits = limits or DEFAULT_LIMITS
    category = ""
    description = ""
    for text in fragments:
        size = len(text)
        if not category and limits.category_min_length <= size <= limits.category_max_length:
            category = text
        if not description and size >= limits.description_min_length:
            description = text
        if category and description:
            break
    return TextClassification(category, description)
