"""
Owns the headless browser lifecycle around a single scrape.
"""

import logging
from typing import Any, Callable, Optional
from urllib.parse import quote

from playwright.async_api import async_playwright

from dj_automation.models.records import FieldMap, MetadataRecord

from .extractor import DomExtractor

log = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# Characters JavaScript's encodeURIComponent leaves untouched besides
# alphanumerics and "-_.", which quote() never escapes.
_URI_COMPONENT_SAFE = "!~*'()"


def build_search_url(base_url: str, query: str) -> str:
    """Appends the percent-encoded query to the base URL."""
    return f"{base_url}{quote(query, safe=_URI_COMPONENT_SAFE)}"


class BrowserSessionManager:
    """
    Launches a fresh Chromium instance for every scrape and guarantees it is
    closed again, whatever happens in between.

    Browser automation failures (layout drift, anti-bot walls, timeouts,
    crashes) are expected here, so they are logged and turned into a None
    result instead of being raised to the caller.
    """

    def __init__(
        self,
        extractor: Optional[DomExtractor] = None,
        headless: bool = True,
        navigation_timeout_ms: int = 30000,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        """
        Args:
            extractor: The DOM extraction engine run against the loaded page.
            headless: Whether to launch Chromium without a window.
            navigation_timeout_ms: Timeout for navigation and load waits.
            playwright_factory: Returns an async context manager yielding a
                Playwright instance.
        """
        self.extractor = extractor or DomExtractor()
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self._playwright_factory = playwright_factory

    async def acquire_and_scrape(
        self, base_url: str, field_map: FieldMap, query: str
    ) -> Optional[MetadataRecord]:
        url = build_search_url(base_url, query)

        try:
            async with self._playwright_factory() as playwright:
                browser = await playwright.chromium.launch(headless=self.headless)
                try:
                    return await self._scrape(browser, url, field_map, query)
                finally:
                    await browser.close()
                    log.debug("Browser closed.")
        except Exception as e:
            log.error(f"[red]Browser automation failed for '{query}': {e}[/red]")
            log.debug("Full traceback:", exc_info=True)
            return None

    async def _scrape(
        self, browser: Any, url: str, field_map: FieldMap, query: str
    ) -> Optional[MetadataRecord]:
        context = await browser.new_context(user_agent=USER_AGENT)
        page = await context.new_page()
        page.set_default_timeout(self.navigation_timeout_ms)

        log.debug(f"Navigating to {url}")
        await page.goto(url)

        if page.is_closed():
            log.error(
                f"[red]Page for '{query}' was closed or navigated away before "
                "extraction.[/red]"
            )
            return None

        await page.wait_for_load_state("domcontentloaded")
        return await self.extractor.extract(page, field_map, query)
