"""
Fills thin key-person descriptions from their linked profile pages.
"""
from typing import List, Optional, Tuple

from .content_cleaner import content_cleaner
from .fetcher import PageFetcher
from .field_validators import FieldValidators
from .models import RecordBuilder
from .page import Page, text_of
from .utils import logger

BIO_CONTAINER_PARAGRAPHS = "article p, main p, [role='main'] p, .content p, [class*='bio'] p, [class*='profile'] p"
SUBSTANTIAL_DESCRIPTION = 150
MIN_BIO = 40
DESCRIPTION_LIMIT = 600


class BioResolver:

    def __init__(self, fetcher: PageFetcher, max_fetches: int = 10):
        self.fetcher = fetcher
        self.max_fetches = max_fetches

    def bio_from_html(self, url: str, html: str) -> Optional[str]:
        """Paragraphs from content containers, else main-body text, else trafilatura's main content."""
        page = Page(url, html)
        parts = [t for t in (text_of(p) for p in page.select(BIO_CONTAINER_PARAGRAPHS)) if 30 < len(t) < 3000]
        if parts:
            return " ".join(parts)[:DESCRIPTION_LIMIT]
        if len(page.main_text) > 100:
            return page.main_text[:DESCRIPTION_LIMIT]
        return content_cleaner.extract_clean_content(html, url)[:DESCRIPTION_LIMIT] or None

    async def resolve(self, builder: RecordBuilder, bio_links: List[Tuple[str, str]] = None) -> int:
        """
        Fetch profile pages for people whose description is short.

        At most max_fetches distinct URLs are requested. Returns the number of people updated.
        """
        bio_links = builder.bio_links if bio_links is None else bio_links
        by_name = {}
        for name, url in bio_links:
            by_name.setdefault(FieldValidators.person_key(name), url)

        fetched = set()
        updated = 0
        for person in builder.key_people:
            if len(fetched) >= self.max_fetches:
                break
            if len(person.get("description") or "") > SUBSTANTIAL_DESCRIPTION:
                continue
            url = by_name.get(FieldValidators.person_key(person["name"]))
            if not url or url in fetched:
                continue
            fetched.add(url)
            html = await self.fetcher.try_fetch(url)
            if not html:
                continue
            bio = self.bio_from_html(url, html)
            if bio and len(bio.strip()) > MIN_BIO and bio.strip().lower() != person["name"].strip().lower():
                person["description"] = bio.strip()
                updated += 1
        if updated:
            logger.info(f"Filled {updated} bios from profile pages ({len(fetched)} fetched)")
        return updated
