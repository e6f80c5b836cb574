# services/extraction/card_extractor.py
"""
Turns a located section container into ``CardRecord`` objects.

A card is recognised by its title link: an ``<a href>`` that contains an
``h2``/``h3`` or sits inside one.  Everything else (category, blurb,
image) is read from the closest structural wrapper around that link.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Set

from bs4 import Tag
from loguru import logger
from prometheus_client import Counter

from models.card import CardRecord
from models.card_factory import card_from_mapping
from models.limits import DEFAULT_LIMITS, ExtractionLimits

from .classifier import classify_text
from .images import resolve_image
from .section_locator import linked_heading
from .text import absolute_url, normalize_text

CARD_ROOT_TAGS = ("article", "li", "div")
CARD_TEXT_TAGS = ["p", "span", "div"]

CARDS_EXTRACTED = Counter(
    "related_cards_extracted_total", "Total number of cards emitted by the extractor"
)


@dataclass(frozen=True)
class CardCandidate:
    anchor: Tag
    heading: Tag
    href: str


def iter_candidates(container: Tag) -> Iterator[CardCandidate]:
    """Title links under ``container``, first occurrence of each href only."""
    seen: Set[str] = set()
    for anchor in container.find_all("a", href=True):
        heading = linked_heading(anchor)
        if heading is None:
            continue
        href = anchor.get("href") or ""
        if not href or href in seen:
            continue
        seen.add(href)
        yield CardCandidate(anchor=anchor, heading=heading, href=href)


def find_card_root(anchor: Tag) -> Optional[Tag]:
    """
    Closest ``article``, else closest ``li``, else closest ``div``.

    The tags are tried in that order, not by distance: an ``article`` three
    levels up beats a ``div`` one level up.
    """
    for name in CARD_ROOT_TAGS:
        root = anchor.find_parent(name)
        if root is not None:
            return root
    return anchor.parent


def card_text_fragments(card_root: Tag, title: str) -> List[str]:
    fragments = []
    for el in card_root.find_all(CARD_TEXT_TAGS):
        text = normalize_text(el.get_text())
        if text and text != title:
            fragments.append(text)
    return fragments


def extract_cards(
    container: Optional[Tag],
    origin: str,
    limits: Optional[ExtractionLimits] = None,
) -> List[CardRecord]:
    """
    Build up to ``limits.max_items`` cards from ``container``, in DOM order.

    Candidates without a title or href are skipped, never emitted half-filled.
    ``image_url`` may come back empty; the enrichment step fills it later.
    """
    limits = limits or DEFAULT_LIMITS
    if container is None:
        return []

    cards: List[CardRecord] = []
    emitted_urls: Set[str] = set()

    for candidate in iter_candidates(container):
        if len(cards) >= limits.max_items:
            break

        title = normalize_text(candidate.heading.get_text())
        if not title:
            logger.debug(f"Skipping {candidate.href}: empty title")
            continue

        url = absolute_url(candidate.href, origin)
        if url in emitted_urls:
            logger.debug(f"Skipping {candidate.href}: resolves to already-emitted {url}")
            continue

        card_root = find_card_root(candidate.anchor)
        if card_root is None:
            fragments, image = [], ""
        else:
            fragments = card_text_fragments(card_root, title)
            image = resolve_image(card_root)
        category, description = classify_text(fragments, limits)

        card = card_from_mapping(
            {
                "title": title,
                "url": url,
                "category": category,
                "description": description,
                "image_url": image,
            },
            origin,
        )
        emitted_urls.add(card.url)
        cards.append(card)

    CARDS_EXTRACTED.inc(len(cards))
    logger.info(f"Extracted {len(cards)} cards")
    return cards
