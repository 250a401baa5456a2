"""
HTTP fetching and document loading with the client-rendering fallbacks.
"""
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from .models import ScraperSettings
from .page import Page
from .state_blobs import augment_with_state_text
from .utils import logger


class FetchError(Exception):
    """A page could not be retrieved (bad status, timeout, network error)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class PageFetcher:
    """
    GET pages with one shared AsyncClient.

    Use as an async context manager; `transport` lets tests substitute httpx.MockTransport.
    """

    def __init__(self, settings: Optional[ScraperSettings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or ScraperSettings.from_settings()
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None
        self.requested = []

    def get_headers(self) -> dict:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

    async def __aenter__(self) -> "PageFetcher":
        self.client = httpx.AsyncClient(
            headers=self.get_headers(),
            follow_redirects=True,
            timeout=self.settings.page_timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.client is not None:
            await self.client.aclose()
            self.client = None
        return False

    async def fetch(self, url: str, timeout: Optional[float] = None) -> str:
        """Response body of a 2xx GET; anything else raises FetchError."""
        if self.client is None:
            raise RuntimeError("PageFetcher must be used inside 'async with'")
        self.requested.append(url)
        try:
            resp = await self.client.get(url, timeout=timeout or self.settings.page_timeout)
        except httpx.TimeoutException as e:
            raise FetchError(url, f"Timed out: {e.__class__.__name__}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or e.__class__.__name__) from e
        if not resp.is_success:
            raise FetchError(url, f"HTTP {resp.status_code}: {resp.reason_phrase}")
        return resp.text

    async def try_fetch(self, url: str) -> Optional[str]:
        """fetch() for skippable pages: failures are logged and become None."""
        try:
            return await self.fetch(url)
        except FetchError as e:
            logger.warning(f"Skipping {url}: {e.reason}")
            return None


@dataclass
class LoadedPage:
    url: str
    html: str
    page: Page
    source: str = "static"  # static | state | browser


async def load_document(url: str, fetcher: PageFetcher, renderer_factory: Optional[Callable] = None,
                        settings: Optional[ScraperSettings] = None) -> LoadedPage:
    """
    Fetch the main page and apply the thin-content fallbacks.

    When main-body text is short the state-blob prose is injected; if it is still
    short and a renderer factory is given, the browser-rendered HTML replaces the
    document when it is materially larger. Raises FetchError if the GET fails.
    """
    settings = settings or fetcher.settings
    html = await fetcher.fetch(url, timeout=settings.main_timeout)
    loaded = LoadedPage(url=url, html=html, page=Page(url, html))
    logger.info(f"Fetched {url} ({len(html)} bytes)")

    if len(loaded.page.main_text) < settings.min_text_for_static:
        augmented = augment_with_state_text(html)
        if augmented:
            logger.info(f"Thin page, injected state-blob text for {url}")
            loaded = LoadedPage(url=url, html=augmented, page=Page(url, augmented), source="state")

    if len(loaded.page.main_text) < settings.min_text_for_browser and renderer_factory is not None:
        logger.info(f"Still thin, trying browser render for {url}")
        async with renderer_factory() as renderer:
            rendered = await renderer.render(url)
        if rendered and len(rendered) > settings.min_rendered_html:
            loaded = LoadedPage(url=url, html=rendered, page=Page(url, rendered), source="browser")

    return loaded
