# goal_scraper/scrapers/browser_fetcher.py

from typing import Optional

from loguru import logger
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from goal_scraper.models.enums import FetchBackend
from .base_scraper import BaseFetcher, FetchError, PageSnapshot, StructureError

DEBUG_SCREENSHOT_PATH = "debug-screenshot.png"


class BrowserFetcher(BaseFetcher):
    """Fetcher rendering the listing page in headless chromium."""

    backend: FetchBackend = FetchBackend.BROWSER

    def __init__(self, settings, debug: bool = False):
        self.settings = settings
        self.debug = debug
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def _launch(self) -> Browser:
        if self._browser is None:
            logger.info("Launching browser...")
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=True)
        return self._browser

    async def fetch(self, url: str, timeout_ms: int) -> PageSnapshot:
        browser = await self._launch()
        context = await browser.new_context(
            user_agent=self.settings.user_agent,
            viewport={
                "width": self.settings.viewport_width,
                "height": self.settings.viewport_height,
            },
            locale=self.settings.locale,
        )
        page = await context.new_page()

        try:
            logger.info(f"Navigating to {url}")
            try:
                await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            except PlaywrightTimeoutError as e:
                raise FetchError(f"Timed out after {timeout_ms} ms loading {url}") from e
            except PlaywrightError as e:
                raise FetchError(f"Navigation to {url} failed: {e.message}") from e

            # Wait for page to stabilize
            await page.wait_for_timeout(self.settings.settle_ms)
            await self._accept_cookies(page)

            if self.debug:
                await page.screenshot(path=DEBUG_SCREENSHOT_PATH, full_page=True)
                logger.debug(f"Saved debug screenshot to {DEBUG_SCREENSHOT_PATH}")

            await self._wait_for_table(page)
            return PageSnapshot(url=url, html=await page.content(), title=await page.title())
        finally:
            await context.close()

    async def _accept_cookies(self, page: Page) -> None:
        """Clicks the first visible consent button, if the popup shows up at all."""
        for selector in self.settings.selectors.cookie_selectors:
            button = page.locator(selector).first
            try:
                if not await button.is_visible(timeout=1000):
                    continue
                await button.click()
                await page.wait_for_timeout(2000)
            except PlaywrightError as e:
                logger.debug(f"Cookie consent via {selector} failed: {e.message}")
                continue
            logger.info(f"Accepted cookies via {selector}")
            return

    async def _wait_for_table(self, page: Page) -> str:
        logger.info("Waiting for goals table...")
        for selector in self.settings.selectors.table_selectors:
            try:
                await page.wait_for_selector(
                    selector, timeout=self.settings.selector_timeout_ms
                )
            except PlaywrightTimeoutError:
                logger.debug(f"No match for table selector {selector!r}")
                continue
            logger.info(f"Found table with selector: {selector}")
            return selector

        title = await page.title()
        html = await page.content()
        logger.error(f"Page title: {title}")
        logger.error(f"First 2000 chars of HTML: {html[:2000]}")
        raise StructureError("Could not find goals table", title=title, snippet=html)

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
            logger.info("Browser closed")
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
