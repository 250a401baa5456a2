"""
Scrape pipeline: main page -> per-page extraction -> crawl & merge -> bio resolution -> record.
"""
import re
from typing import Any, Callable, Dict, Optional

import httpx

from .assembler import PageExtractor, finalize, start_record
from .bio_resolver import BioResolver
from .crawl import CrawlController
from .fetcher import FetchError, PageFetcher, load_document
from .models import ScrapeOutcome, ScraperSettings
from .renderer import BrowserRenderer
from .utils import logger

SCHEME_RE = re.compile(r"^https?://", re.I)


def normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not SCHEME_RE.match(url):
        url = f"https://{url}"
    return url


class KnowledgeScraper:
    """
    One scrape per call; no state is shared between calls.

    `transport` is passed to httpx (tests use MockTransport); `renderer_factory`
    defaults to a headless BrowserRenderer when browser_fallback is enabled.
    """

    def __init__(self, settings: Optional[ScraperSettings] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 renderer_factory: Optional[Callable] = None):
        self.settings = settings or ScraperSettings.from_settings()
        self.transport = transport
        if renderer_factory is None and self.settings.browser_fallback:
            renderer_factory = self._default_renderer
        self.renderer_factory = renderer_factory

    def _default_renderer(self) -> BrowserRenderer:
        return BrowserRenderer(
            timeout_ms=self.settings.browser_timeout_ms,
            settle_ms=self.settings.browser_settle_ms,
            user_agent=self.settings.user_agent,
        )

    async def scrape(self, url: str) -> ScrapeOutcome:
        url = normalize_url(url)
        logger.info(f"Scraping {url}")
        try:
            async with PageFetcher(self.settings, transport=self.transport) as fetcher:
                loaded = await load_document(url, fetcher, self.renderer_factory, self.settings)
                page_extractor = PageExtractor(self.settings)
                builder = start_record(page_extractor.extract(loaded.page))

                await CrawlController(fetcher, page_extractor, self.settings).run(builder, loaded.page)
                await BioResolver(fetcher, self.settings.max_bio_fetches).resolve(builder)

                record = finalize(builder).build()
        except FetchError as e:
            logger.error(f"Failed to fetch {url}: {e.reason}")
            return ScrapeOutcome(success=False, error=e.reason)
        except Exception as e:
            logger.exception(f"Unexpected error while scraping {url}: {e}")
            return ScrapeOutcome(success=False, error=str(e) or e.__class__.__name__)

        logger.info(
            f"Scraped {url}: {len(record.key_people)} people, {len(record.offerings)} offerings "
            f"(source: {loaded.source})"
        )
        return ScrapeOutcome(success=True, record=record)


async def scrape(url: str, settings: Optional[Dict[str, Any]] = None, **kwargs) -> ScrapeOutcome:
    """Convenience entry point: `await scrape("example.com")`."""
    return await KnowledgeScraper(ScraperSettings.from_settings(settings), **kwargs).scrape(url)
