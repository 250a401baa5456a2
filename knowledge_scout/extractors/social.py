"""
Online presence: one profile URL per known platform, first match wins.
"""
import re
from typing import Dict, Iterable, List

from ..page import Page

PLATFORMS = [
    ("linked_in", re.compile(r"linkedin\.com", re.I)),
    ("facebook", re.compile(r"facebook\.com|fb\.com", re.I)),
    ("instagram", re.compile(r"instagram\.com", re.I)),
    ("twitter_x", re.compile(r"twitter\.com|//(?:www\.)?x\.com", re.I)),
    ("youtube", re.compile(r"youtube\.com|youtu\.be", re.I)),
]
OTHER_SOCIAL_RE = re.compile(
    r"tiktok\.com|pinterest\.com|yelp\.com|threads\.net|github\.com|vimeo\.com|medium\.com|nextdoor\.com"
    r"|houzz\.com|angi\.com|bbb\.org",
    re.I,
)
MAX_OTHER = 10


def platform_of(url: str):
    for field, pattern in PLATFORMS:
        if pattern.search(url):
            return field
    return None


def presence_from_urls(urls: Iterable[str]) -> Dict:
    """Map profile URLs onto platform fields; unknown social hosts go to other_social."""
    presence: Dict = {}
    other: List[str] = []
    for url in urls:
        if not url:
            continue
        field = platform_of(url)
        if field:
            presence.setdefault(field, url)
        elif OTHER_SOCIAL_RE.search(url) and url not in other:
            other.append(url)
    if other:
        presence["other_social"] = other[:MAX_OTHER]
    return presence


class SocialExtractor:

    def extract(self, page: Page, same_as: List[str] = None) -> Dict:
        """Links on the page win; JSON-LD sameAs fills platforms the page does not link."""
        hrefs = [a["href"].strip() for a in page.select("a[href]") if a["href"].strip().startswith(("http", "//"))]
        presence = presence_from_urls(hrefs)
        from_same_as = presence_from_urls(same_as or [])
        for field, value in from_same_as.items():
            if field == "other_social":
                merged = presence.get("other_social", []) + [u for u in value if u not in presence.get("other_social", [])]
                presence["other_social"] = merged[:MAX_OTHER]
            else:
                presence.setdefault(field, value)
        return presence


social_extractor = SocialExtractor()
