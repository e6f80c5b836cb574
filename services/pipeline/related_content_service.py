# services/pipeline/related_content_service.py
import time
from datetime import datetime, timezone
from typing import List, Optional

from bs4 import BeautifulSoup
from loguru import logger

# ----------------------------------------------------------------------
#  Extraction / enrichment stages
# ----------------------------------------------------------------------
from services.enrichment.concurrency import map_with_concurrency
from services.enrichment.og_image_fetcher import ImageLookupStatus, OgImageFetcher
from services.extraction.card_extractor import extract_cards, iter_candidates
from services.extraction.section_locator import locate_section
from services.renderer.page_renderer import PageRenderer, PlaywrightPageRenderer
from core.config import get_settings
from core.exceptions import ScraperException
from models.card import CardRecord, Payload
from models.scrape_request import ScrapeRequest, ScrapeResult, ScrapeStats, ScrapeStatus
from models.snapshot import DomSnapshot

from .config_loader import TargetConfig, get_target_config


# ----------------------------------------------------------------------
#  RelatedContentService – orchestrator
# ----------------------------------------------------------------------
class RelatedContentService:
    """
    Runs one target end to end: render → locate section → extract cards →
    fill missing images from article metadata → ``Payload``.

    Extraction is a single synchronous pass over the snapshot; only the
    image enrichment runs concurrently.
    """

    def __init__(
        self,
        target: TargetConfig,
        renderer: Optional[PageRenderer] = None,
        image_fetcher: Optional[OgImageFetcher] = None,
        concurrency: Optional[int] = None,
    ):
        settings = get_settings()
        self.target = target
        self.renderer = renderer or PlaywrightPageRenderer()
        self.image_fetcher = image_fetcher or OgImageFetcher(origin=target.base_origin)
        self.concurrency = concurrency or settings.ENRICH_CONCURRENCY

    @classmethod
    def for_target(cls, target_name: str, **kwargs) -> "RelatedContentService":
        """Build a service from a name in ``configs/targets.yaml``."""
        return cls(get_target_config(target_name), **kwargs)

    # ------------------------------------------------------------------
    #  Stage 1 – extraction (sync, pure over the snapshot)
    # ------------------------------------------------------------------
    def extract(
        self, snapshot: DomSnapshot, stats: Optional[ScrapeStats] = None
    ) -> List[CardRecord]:
        soup: BeautifulSoup = snapshot.soup()
        location = locate_section(soup, self.target.heading, self.target.limits)
        if not location.found:
            return []

        if stats is not None:
            stats.candidates_seen = sum(1 for _ in iter_candidates(location.container))
        return extract_cards(
            location.container, self.target.base_origin, self.target.limits
        )

    # ------------------------------------------------------------------
    #  Stage 2 – enrichment (bounded concurrency, per-item isolation)
    # ------------------------------------------------------------------
    async def enrich(
        self, cards: List[CardRecord], stats: Optional[ScrapeStats] = None
    ) -> List[CardRecord]:
        stats = stats if stats is not None else ScrapeStats()

        async def fill_image(card: CardRecord, idx: int) -> CardRecord:
            if card.has_image:
                stats.images_from_markup += 1
                return card

            lookup = await self.image_fetcher.lookup(card.url)
            # counters are updated between awaits, so workers never interleave here
            if lookup.status is ImageLookupStatus.FOUND:
                stats.images_from_metadata += 1
            elif lookup.status is ImageLookupStatus.ABSENT:
                stats.metadata_absent += 1
            else:
                stats.metadata_failed += 1
            logger.debug(f"Card {idx} image lookup: {lookup.status.value} {lookup.reason}")
            return card.with_image(lookup.url)

        return await map_with_concurrency(cards, self.concurrency, fill_image)

    # ------------------------------------------------------------------
    async def build_payload(
        self, snapshot: DomSnapshot, stats: Optional[ScrapeStats] = None
    ) -> Payload:
        """Extract + enrich a snapshot that was rendered elsewhere."""
        stats = stats if stats is not None else ScrapeStats()
        cards = self.extract(snapshot, stats)
        stats.cards_emitted = len(cards)
        items = await self.enrich(cards, stats) if cards else []
        return Payload(
            source_url=snapshot.source_url,
            scraped_at=datetime.now(timezone.utc),
            items=items,
        )

    # ------------------------------------------------------------------
    async def run(self, request: ScrapeRequest) -> ScrapeResult:
        """
        Render the target page and build its payload.

        Only a renderer failure escapes as an exception; every per-card
        problem has already been absorbed into empty fields.
        """
        if request.concurrency:
            self.concurrency = request.concurrency
        if request.fetch_timeout_seconds:
            self.image_fetcher.timeout = request.fetch_timeout_seconds
        if request.settle_delay_seconds is not None and isinstance(
            self.renderer, PlaywrightPageRenderer
        ):
            self.renderer.settle_delay = request.settle_delay_seconds
        source_url = request.source_url or self.target.source_url

        request.status = ScrapeStatus.RUNNING
        request.started_at = datetime.now(timezone.utc)
        stats = ScrapeStats()
        start = time.perf_counter()
        logger.info(f"Starting scrape {request.scrape_id} of {source_url}")

        try:
            snapshot = await self.renderer.render(source_url, self.target.heading)
            payload = await self.build_payload(snapshot, stats)
        except ScraperException as exc:
            request.status = ScrapeStatus.FAILED
            logger.error(f"Scrape {request.scrape_id} failed: {exc.message}")
            raise
        finally:
            request.completed_at = datetime.now(timezone.utc)
            stats.duration_seconds = time.perf_counter() - start

        request.status = ScrapeStatus.COMPLETED
        logger.info(
            f"Scrape completed – {stats.cards_emitted} cards "
            f"({stats.images_from_markup} images from markup, "
            f"{stats.images_from_metadata} from metadata, "
            f"{stats.metadata_absent} absent, {stats.metadata_failed} failed) "
            f"in {stats.duration_seconds:.2f}s"
        )
        return ScrapeResult(
            scrape_id=request.scrape_id,
            status=request.status,
            payload=payload,
            stats=stats,
        )

    # ------------------------------------------------------------------
    async def cleanup(self) -> None:
        """Close the image fetcher's HTTP client."""
        await self.image_fetcher.aclose()
