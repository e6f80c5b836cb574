# services/extraction/section_locator.py
"""
Find the wrapper that holds a named content section's cards.

The section itself carries no stable id or class, only a visible heading
("You might be interested in", …).  We find that heading and climb its
ancestors until enough card-like links are in view.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from models.limits import DEFAULT_LIMITS, ExtractionLimits

from .text import normalize_text

SECTION_HEADING_TAGS = ["h1", "h2", "h3"]
CARD_HEADING_TAGS = ["h2", "h3"]


class LocateStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class SectionLocation:
    status: LocateStatus
    heading: Optional[Tag] = None
    container: Optional[Tag] = None
    depth: int = 0
    # False when the depth bound ran out before either stop condition held
    satisfied: bool = False

    @property
    def found(self) -> bool:
        return self.status is LocateStatus.FOUND


NOT_FOUND = SectionLocation(status=LocateStatus.NOT_FOUND)


def linked_heading(anchor: Tag) -> Optional[Tag]:
    """The ``h2``/``h3`` inside ``anchor``, else the one wrapping it."""
    return anchor.find(CARD_HEADING_TAGS) or anchor.find_parent(CARD_HEADING_TAGS)


def find_section_heading(soup: BeautifulSoup, phrase: str) -> Optional[Tag]:
    needle = normalize_text(phrase).lower()
    for heading in soup.find_all(SECTION_HEADING_TAGS):
        if needle in normalize_text(heading.get_text()).lower():
            return heading
    return None


def _count_links(container: Tag):
    anchors = container.find_all("a", href=True)
    linked = sum(1 for a in anchors if linked_heading(a) is not None)
    return linked, len(anchors)


def locate_section(
    soup: BeautifulSoup,
    phrase: str,
    limits: Optional[ExtractionLimits] = None,
) -> SectionLocation:
    """
    Return the container for the section titled ``phrase``.

    Climbs from the heading's parent one level at a time, for at most
    ``limits.max_climb_depth`` levels, and stops at the first level holding
    ``max_items`` linked headings or ``min_section_anchors`` links.  If no
    level qualifies, the highest ancestor reached is returned with
    ``satisfied=False``.  Only a missing heading yields ``NOT_FOUND``.
    """
    limits = limits or DEFAULT_LIMITS

    heading = find_section_heading(soup, phrase)
    if heading is None:
        logger.info(f"Section heading '{phrase}' not found")
        return NOT_FOUND

    container = heading.parent
    reached = container
    depth = 0
    while depth < limits.max_climb_depth and container is not None:
        reached = container
        linked, anchors = _count_links(container)
        if linked >= limits.max_items or anchors >= limits.min_section_anchors:
            logger.debug(
                f"Section container <{container.name}> at depth {depth}: "
                f"{linked} linked headings, {anchors} links"
            )
            return SectionLocation(
                status=LocateStatus.FOUND,
                heading=heading,
                container=container,
                depth=depth,
                satisfied=True,
            )
        container = container.parent
        depth += 1

    if container is not None:
        reached = container
    logger.debug(
        f"Climb bound exhausted after {depth} levels; "
        f"using <{getattr(reached, 'name', None)}> as best effort"
    )
    return SectionLocation(
        status=LocateStatus.FOUND,
        heading=heading,
        container=reached,
        depth=depth,
        satisfied=False,
    )
