# models/snapshot.py
from __future__ import annotations

from datetime import datetime, timezone

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

# ----------------------------------------------------------------------
#  Attributes the renderer stamps onto the live DOM before serialising it.
#  They carry values that only exist inside a browser (resolved image
#  sources, computed styles) so the extractor can work on plain HTML.
# ----------------------------------------------------------------------
RENDERED_CURRENT_SRC_ATTR = "data-rendered-current-src"
RENDERED_SRC_ATTR = "data-rendered-src"
RENDERED_BACKGROUND_ATTR = "data-rendered-background-image"

HTML_PARSER = "html.parser"


class DomSnapshot(BaseModel):
    """A hydrated page, frozen as HTML."""

    source_url: str
    html: str
    captured_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def soup(self) -> BeautifulSoup:
        """Parse the snapshot; every call returns a fresh tree."""
        return BeautifulSoup(self.html, HTML_PARSER)
