# models/card.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .limits import MAX_ITEMS


class CardRecord(BaseModel):
    """
    Pydantic v2 model for one "related content" card.

    Attribute names are snake_case; the aliases are the camelCase keys of the
    published JSON.  Missing values are empty strings, never ``None``.
    """

    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    category: str = ""
    description: str = ""
    image_url: str = Field(default="", alias="imageUrl")

    # ------------------------------------------------------------------
    # Allow population by attribute name as well as alias; drop extras
    # ------------------------------------------------------------------
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("category", "description", "image_url", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        """``None`` collapses to an empty string so the key is never null."""
        return "" if v is None else v

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    def with_image(self, image_url: str) -> "CardRecord":
        """Return a copy carrying ``image_url`` (the only mutation enrichment makes)."""
        return self.model_copy(update={"image_url": image_url or ""})

    def to_dict(self) -> Dict[str, str]:
        """Serialise with the published camelCase keys."""
        return self.model_dump(by_alias=True)


class Payload(BaseModel):
    """The persisted artefact: where the cards came from, when, and the cards."""

    source_url: str = Field(..., alias="sourceUrl")
    scraped_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="scrapedAt",
    )
    items: List[CardRecord] = Field(default_factory=list, max_length=MAX_ITEMS)

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict:
        """JSON-ready dict; ``scrapedAt`` becomes an ISO-8601 string."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
