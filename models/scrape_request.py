# models/scrape_request.py
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .card import Payload


# ----------------------------------------------------------------------
#  Run status enumeration – the service moves a request through these
# ----------------------------------------------------------------------
class ScrapeStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


# ----------------------------------------------------------------------
#  Counters the service fills in while it runs.  They keep "no image on
#  the page" apart from "image lookup failed", which the payload itself
#  does not expose.
# ----------------------------------------------------------------------
class ScrapeStats(BaseModel):
    candidates_seen: int = 0
    cards_emitted: int = 0
    images_from_markup: int = 0
    images_from_metadata: int = 0
    metadata_absent: int = 0
    metadata_failed: int = 0
    duration_seconds: float = 0.0


# ----------------------------------------------------------------------
#  Main request model – this is what ``run_scraper.py`` builds and passes
# ----------------------------------------------------------------------
class ScrapeRequest(BaseModel):
    """
    Request model for one scrape of a configured target.

    Only ``target_name`` is required; every tuning knob left as ``None``
    falls back to ``core.config.Settings``.
    """

    scrape_id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        description="Unique identifier for the scrape run",
    )
    target_name: str = Field(..., description="Key in configs/targets.yaml")
    source_url: Optional[str] = Field(
        default=None,
        description="Overrides the target's source_url (e.g. a staging host)",
    )

    # ------------------------------------------------------------------
    #  Enrichment & rendering controls
    # ------------------------------------------------------------------
    concurrency: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of simultaneous image lookups",
    )
    fetch_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-article timeout for the og:image lookup",
    )
    settle_delay_seconds: Optional[float] = Field(
        default=None,
        ge=0,
        description="Wait after DOMContentLoaded before reading the page",
    )

    # ------------------------------------------------------------------
    #  Tracking fields – populated by the service as the run proceeds
    # ------------------------------------------------------------------
    status: ScrapeStatus = Field(default=ScrapeStatus.PENDING)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("source_url")
    @classmethod
    def _validate_source_url(cls, v: Optional[str]) -> Optional[str]:
        """An override must be an absolute http(s) URL."""
        if v is None:
            return v
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"source_url must be absolute http(s): {v}")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "target_name": "st_george_regional",
                "concurrency": 3,
                "fetch_timeout_seconds": 20,
                "settle_delay_seconds": 4.5,
            }
        }


class ScrapeResult(BaseModel):
    """What the service hands back: the publishable payload plus run stats."""

    scrape_id: uuid.UUID
    status: ScrapeStatus
    payload: Payload
    stats: ScrapeStats = Field(default_factory=ScrapeStats)
