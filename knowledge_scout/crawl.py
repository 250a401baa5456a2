"""
Bounded same-origin crawl of likely about/contact/services/team pages.
"""
from typing import List, Optional
from urllib.parse import urljoin, urlparse, urlunparse

from .assembler import PageExtractor
from .fetcher import PageFetcher
from .merge import merge_page
from .models import RecordBuilder, ScraperSettings
from .page import Page, is_same_origin, resolve_url, text_of
from .utils import logger

LINK_KEYWORDS = ["about", "contact", "services", "team", "leadership", "staff"]


def strip_query(url: str) -> str:
    parsed = urlparse(url)
    return urlunparse(parsed._replace(query="", fragment=""))


def visit_key(url: str) -> str:
    return url.rstrip("/")


class CrawlController:
    """
    Candidate pages: the fixed paths from settings, then same-origin links on the
    main page whose href or anchor text names one of LINK_KEYWORDS. Pages are fetched
    sequentially so the first page to supply a field wins deterministically.
    """

    def __init__(self, fetcher: PageFetcher, page_extractor: Optional[PageExtractor] = None,
                 settings: Optional[ScraperSettings] = None):
        self.fetcher = fetcher
        self.settings = settings or fetcher.settings
        self.page_extractor = page_extractor or PageExtractor(self.settings)

    def discovered_links(self, page: Page) -> List[str]:
        links = []
        for a in page.select("a[href]"):
            full = resolve_url(a["href"], page.url)
            if not full or not is_same_origin(full, page.url):
                continue
            haystack = f"{a['href']} {text_of(a)}".lower()
            if any(keyword in haystack for keyword in LINK_KEYWORDS):
                links.append(strip_query(full))
        return links

    def candidate_urls(self, page: Page) -> List[str]:
        """Ordered, deduplicated candidates (trailing slash ignored), excluding the page itself."""
        seen = {visit_key(strip_query(page.url)), visit_key(page.origin)}
        candidates = []
        fixed = [urljoin(page.origin + "/", path.lstrip("/")) for path in self.settings.candidate_paths]
        for url in fixed + self.discovered_links(page):
            key = visit_key(url)
            if key in seen:
                continue
            seen.add(key)
            candidates.append(url)
        return candidates

    async def run(self, builder: RecordBuilder, page: Page) -> RecordBuilder:
        merged = 0
        for url in self.candidate_urls(page):
            html = await self.fetcher.try_fetch(url)
            if not html:
                continue
            extraction = self.page_extractor.extract(Page(url, html))
            merge_page(builder, extraction)
            merged += 1
            logger.info(f"Merged candidate page {url}")
        logger.info(f"Crawl finished: {merged} additional pages merged")
        return builder
