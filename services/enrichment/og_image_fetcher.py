# services/enrichment/og_image_fetcher.py
"""
Fallback image lookup: fetch an article page and read its link-preview
image from ``og:image`` (or ``twitter:image``) metadata.

The body is scanned with two regexes per tag rather than parsed, since the
attribute order inside ``<meta>`` varies between sites.  Every failure
(network error, timeout, non-2xx) is absorbed into an ``ImageLookup`` with
status ``FAILED``; callers that only want a string get ``""``.
"""

import asyncio
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol, Tuple

import httpx
from loguru import logger
from prometheus_client import Counter, Histogram

from core.config import get_settings
from services.extraction.text import absolute_url

IMAGE_LOOKUPS = Counter(
    "related_image_lookups_total",
    "og:image lookups by outcome",
    ["status"],
)
IMAGE_LOOKUP_DURATION = Histogram(
    "related_image_lookup_seconds", "Time spent fetching article metadata"
)


def _meta_patterns(key_attr: str, key: str) -> Tuple[re.Pattern, re.Pattern]:
    key_re = rf"""{key_attr}=["']{re.escape(key)}["']"""
    content_re = r"""content=["']([^"']+)["']"""
    return (
        re.compile(rf"<meta[^>]+{key_re}[^>]+{content_re}[^>]*>", re.IGNORECASE),
        re.compile(rf"<meta[^>]+{content_re}[^>]+{key_re}[^>]*>", re.IGNORECASE),
    )


# Searched in order; og:image is keyed by ``property``, twitter:image by ``name``.
META_IMAGE_PATTERNS = (
    ("og:image", _meta_patterns("property", "og:image")),
    ("twitter:image", _meta_patterns("name", "twitter:image")),
)


def find_meta_image(html: str) -> str:
    """Raw ``content`` of the first og:image, else twitter:image, else ``""``."""
    for key, patterns in META_IMAGE_PATTERNS:
        for pattern in patterns:
            match = pattern.search(html)
            if match and match.group(1):
                logger.debug(f"Found {key} metadata")
                return match.group(1)
    return ""


# ----------------------------------------------------------------------
# Transport
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class FetchedDocument:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class DocumentFetcher(Protocol):
    async def fetch(self, url: str, headers: Dict[str, str]) -> FetchedDocument:
        ...


class HttpxDocumentFetcher:
    """
    ``DocumentFetcher`` on top of a shared ``httpx.AsyncClient``.

    The owned client has no httpx timeout of its own; ``OgImageFetcher``
    bounds each request with ``asyncio.wait_for`` instead.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=True, timeout=timeout
        )

    async def fetch(self, url: str, headers: Dict[str, str]) -> FetchedDocument:
        resp = await self._client.get(url, headers=headers)
        return FetchedDocument(status_code=resp.status_code, text=resp.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


# ----------------------------------------------------------------------
# Lookup results
# ----------------------------------------------------------------------
class ImageLookupStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"      # page fetched, no usable metadata
    FAILED = "failed"      # network error, timeout or non-2xx


@dataclass(frozen=True)
class ImageLookup:
    status: ImageLookupStatus
    url: str = ""
    reason: str = ""


class OgImageFetcher:
    """
    Resolves an article URL to its preview image.

    Parameters
    ----------
    origin: str
        Site origin used to absolutise both the article URL and the
        metadata value.
    fetcher: DocumentFetcher | None
        Transport; defaults to an ``HttpxDocumentFetcher`` owned (and
        closed) by this object.
    timeout: float | None
        Seconds before the in-flight request is cancelled.
    """

    def __init__(
        self,
        origin: str,
        fetcher: Optional[DocumentFetcher] = None,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        settings = get_settings()
        self.origin = origin
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT_SECONDS
        self.headers = headers or {
            "User-Agent": settings.DEFAULT_USER_AGENT,
            "Accept": settings.DEFAULT_ACCEPT,
        }
        self._fetcher = fetcher or HttpxDocumentFetcher()

    async def __aenter__(self) -> "OgImageFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        close = getattr(self._fetcher, "aclose", None)
        if close is not None:
            await close()

    async def lookup(self, article_url: str) -> ImageLookup:
        url = absolute_url(article_url, self.origin)
        if not url:
            IMAGE_LOOKUPS.labels(status=ImageLookupStatus.ABSENT.value).inc()
            return ImageLookup(ImageLookupStatus.ABSENT, reason="empty article url")

        start = time.perf_counter()
        try:
            doc = await asyncio.wait_for(
                self._fetcher.fetch(url, self.headers), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"og:image lookup timed out after {self.timeout}s: {url}")
            return self._failed(f"timeout after {self.timeout}s")
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(f"og:image lookup failed for {url}: {exc}")
            return self._failed(str(exc) or exc.__class__.__name__)
        finally:
            IMAGE_LOOKUP_DURATION.observe(time.perf_counter() - start)

        if not doc.ok:
            logger.warning(f"og:image lookup got HTTP {doc.status_code} for {url}")
            return self._failed(f"HTTP {doc.status_code}")

        image = absolute_url(find_meta_image(doc.text), self.origin)
        if not image:
            logger.debug(f"No preview image metadata on {url}")
            IMAGE_LOOKUPS.labels(status=ImageLookupStatus.ABSENT.value).inc()
            return ImageLookup(ImageLookupStatus.ABSENT, reason="no image metadata")

        IMAGE_LOOKUPS.labels(status=ImageLookupStatus.FOUND.value).inc()
        return ImageLookup(ImageLookupStatus.FOUND, url=image)

    async def fetch_image_url(self, article_url: str) -> str:
        return (await self.lookup(article_url)).url

    @staticmethod
    def _failed(reason: str) -> ImageLookup:
        IMAGE_LOOKUPS.labels(status=ImageLookupStatus.FAILED.value).inc()
        return ImageLookup(ImageLookupStatus.FAILED, reason=reason)
