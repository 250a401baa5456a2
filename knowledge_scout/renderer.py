"""
Headless-browser rendering for client-side rendered pages (Playwright, Chromium).
"""
import asyncio
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .utils import logger


class BrowserRenderer:
    """
    Async context manager owning one headless Chromium for the duration of a scrape.

    Launch failures (browsers not installed, sandbox errors) leave the renderer
    unavailable and render() returns None. The browser is always closed on exit.
    """

    def __init__(self, timeout_ms: int = 15000, settle_ms: int = 2000, user_agent: Optional[str] = None):
        self.timeout_ms = timeout_ms
        self.settle_ms = settle_ms
        self.user_agent = user_agent
        self._playwright = None
        self._browser = None

    async def __aenter__(self) -> "BrowserRenderer":
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=True)
        except (PlaywrightError, OSError) as e:
            logger.warning(f"Browser unavailable, skipping rendered fallback: {e}")
            await self._shutdown()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self._shutdown()
        return False

    async def _shutdown(self):
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.debug(f"Browser close failed: {e}")
            self._browser = None
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except PlaywrightError as e:
                logger.debug(f"Playwright stop failed: {e}")
            self._playwright = None

    @property
    def available(self) -> bool:
        return self._browser is not None

    async def render(self, url: str) -> Optional[str]:
        """Rendered HTML after DOM-content-loaded plus the settle delay, or None on any browser error."""
        if not self.available:
            return None
        page = None
        try:
            page = await self._browser.new_page(user_agent=self.user_agent)
            await page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
            await asyncio.sleep(self.settle_ms / 1000)
            return await page.content()
        except PlaywrightError as e:
            logger.warning(f"Browser render failed for {url}: {e}")
            return None
        finally:
            if page is not None:
                try:
                    await page.close()
                except PlaywrightError as e:
                    logger.debug(f"Page close failed: {e}")
