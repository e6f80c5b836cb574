# services/renderer/page_renderer.py
"""
Produces the hydrated ``DomSnapshot`` the extractor works on.

``PlaywrightPageRenderer`` drives headless Chromium: load, let client-side
rendering settle, wait for the section heading, nudge lazy content with a
scroll, then stamp browser-only image data onto the DOM and serialise it.
``StaticPageRenderer`` serves saved HTML for offline runs and tests.
"""

from pathlib import Path
from typing import Any, Optional, Protocol, TYPE_CHECKING, Union

from loguru import logger

from core.config import get_settings
from core.exceptions import RendererError
from models.snapshot import (
    DomSnapshot,
    RENDERED_BACKGROUND_ATTR,
    RENDERED_CURRENT_SRC_ATTR,
    RENDERED_SRC_ATTR,
)

if TYPE_CHECKING:                     # pragma: no cover
    from playwright.async_api import Page as PlaywrightPage
else:
    PlaywrightPage = Any  # type: ignore

CHROMIUM_ARGS = [
    "--disable-gpu",
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]

EXTRA_HTTP_HEADERS = {
    "accept-language": "en-US,en;q=0.9",
    "upgrade-insecure-requests": "1",
}

# Copies currentSrc / src / computed background-image into data-* attributes
# so they survive page.content().
STAMP_RENDERED_IMAGES_JS = """
([currentAttr, srcAttr, bgAttr]) => {
    document.querySelectorAll("img").forEach(img => {
        if (img.currentSrc) img.setAttribute(currentAttr, img.currentSrc);
        if (img.src) img.setAttribute(srcAttr, img.src);
    });
    document.querySelectorAll('[style*="background-image"]').forEach(el => {
        const bg = getComputedStyle(el).backgroundImage;
        if (bg && bg !== "none") el.setAttribute(bgAttr, bg);
    });
}
"""


class PageRenderer(Protocol):
    async def render(self, url: str, wait_for_text: str) -> DomSnapshot:
        ...


class StaticPageRenderer:
    """Returns the same HTML for any URL."""

    def __init__(self, html: str):
        self.html = html

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "StaticPageRenderer":
        try:
            return cls(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            raise RendererError(
                f"Cannot read snapshot file {path}", {"path": str(path)}
            ) from exc

    async def render(self, url: str, wait_for_text: str) -> DomSnapshot:
        if wait_for_text.lower() not in self.html.lower():
            logger.warning(f"Snapshot for {url} does not mention '{wait_for_text}'")
        return DomSnapshot(source_url=url, html=self.html)


class PlaywrightPageRenderer:
    """One fresh headless Chromium per ``render`` call."""

    def __init__(
        self,
        settle_delay: Optional[float] = None,
        navigation_timeout: Optional[float] = None,
        presence_timeout: Optional[float] = None,
        scroll_by: Optional[int] = None,
        post_scroll_delay: Optional[float] = None,
        user_agent: Optional[str] = None,
        viewport: Optional[dict] = None,
    ):
        settings = get_settings()
        self.settle_delay = (
            settle_delay if settle_delay is not None else settings.SETTLE_DELAY_SECONDS
        )
        self.navigation_timeout = navigation_timeout or settings.NAVIGATION_TIMEOUT_SECONDS
        self.presence_timeout = presence_timeout or settings.PRESENCE_TIMEOUT_SECONDS
        self.scroll_by = scroll_by if scroll_by is not None else settings.SCROLL_BY_PIXELS
        self.post_scroll_delay = (
            post_scroll_delay
            if post_scroll_delay is not None
            else settings.POST_SCROLL_DELAY_SECONDS
        )
        self.user_agent = user_agent or settings.DEFAULT_USER_AGENT
        self.viewport = viewport or {"width": 1280, "height": 1024}

    async def render(self, url: str, wait_for_text: str) -> DomSnapshot:
        # Playwright is imported on first render.
        from playwright.async_api import Error as PlaywrightError
        from playwright.async_api import async_playwright

        logger.info(f"Rendering {url}")
        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                try:
                    context = await browser.new_context(
                        viewport=self.viewport,
                        user_agent=self.user_agent,
                        extra_http_headers=EXTRA_HTTP_HEADERS,
                        java_script_enabled=True,
                    )
                    page = await context.new_page()
                    html = await self._load(page, url, wait_for_text)
                finally:
                    await browser.close()
        except PlaywrightError as exc:
            raise RendererError(f"Failed to render {url}: {exc}", {"url": url}) from exc

        logger.info(f"Captured {len(html)} bytes of rendered HTML from {url}")
        return DomSnapshot(source_url=url, html=html)

    async def _load(self, page: PlaywrightPage, url: str, wait_for_text: str) -> str:
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        await page.goto(
            url,
            wait_until="domcontentloaded",
            timeout=self.navigation_timeout * 1000,
        )
        await page.wait_for_timeout(self.settle_delay * 1000)

        try:
            await page.wait_for_selector(
                f"text={wait_for_text}", timeout=self.presence_timeout * 1000
            )
        except PlaywrightTimeoutError:
            # The locator reports the section as missing; not a render failure.
            logger.warning(
                f"'{wait_for_text}' did not appear within {self.presence_timeout}s on {url}"
            )

        await page.evaluate(f"window.scrollBy(0, {int(self.scroll_by)})")
        await page.wait_for_timeout(self.post_scroll_delay * 1000)

        await page.evaluate(
            STAMP_RENDERED_IMAGES_JS,
            [RENDERED_CURRENT_SRC_ATTR, RENDERED_SRC_ATTR, RENDERED_BACKGROUND_ATTR],
        )
        return await page.content()
