"""
Parsed page wrapper.

BeautifulSoup (lxml parser) is the document query provider; this module adds the
handful of traversal helpers the extractors share and caches per-page derived
values such as main-body text.
"""
import warnings
from functools import cached_property
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag, XMLParsedAsHTMLWarning

from .content_cleaner import clean_text

# Suppress BS4 warning for XML parsed as HTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "lxml")


def text_of(el) -> str:
    if el is None:
        return ""
    return clean_text(el.get_text(" "))


def class_and_id(el: Tag) -> str:
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return f"{' '.join(classes)} {el.get('id') or ''}"


def closest(el: Tag, selector: str) -> Optional[Tag]:
    """Nearest ancestor-or-self matching the selector."""
    if not isinstance(el, Tag):
        return None
    return el.css.closest(selector)


def next_element_sibling(el: Tag) -> Optional[Tag]:
    return el.find_next_sibling()


def next_until(el: Tag, stop_tags: Iterable[str]) -> List[Tag]:
    """Element siblings after `el` up to (not including) the first one named in stop_tags."""
    stop = set(stop_tags)
    siblings = []
    for sibling in el.find_next_siblings():
        if sibling.name in stop:
            break
        siblings.append(sibling)
    return siblings


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


def resolve_url(href: Optional[str], base_url: str) -> Optional[str]:
    """Absolute URL for an href, or None for fragments, scripts and unparseable values."""
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith(("javascript:", "mailto:", "tel:")):
        return None
    try:
        full = urljoin(base_url, href)
    except ValueError:
        return None
    if urlparse(full).scheme not in ("http", "https"):
        return None
    return full


def is_same_origin(url: str, base_url: str) -> bool:
    return origin_of(url) == origin_of(base_url)


class Page:
    """One fetched HTML document plus cached derived views."""

    def __init__(self, url: str, html: str, noise=None):
        from .noise import noise_classifier

        self.url = url
        self.html = html or ""
        self.soup = parse_html(self.html)
        self.noise = noise or noise_classifier

    @property
    def origin(self) -> str:
        return origin_of(self.url)

    @cached_property
    def title(self) -> str:
        return text_of(self.soup.title) if self.soup.title else ""

    def meta(self, name: str) -> str:
        tag = self.soup.find("meta", attrs={"name": name}) or self.soup.find("meta", attrs={"property": name})
        return clean_text(tag.get("content")) if tag else ""

    @cached_property
    def main_text(self) -> str:
        return self.noise.main_body_text(self.soup)

    @cached_property
    def main_chunks(self) -> List[str]:
        return self.noise.main_body_chunks(self.soup)

    @cached_property
    def full_text(self) -> str:
        """Every text node in <body>, noise included."""
        body = self.soup.body or self.soup
        return text_of(body)

    @cached_property
    def legal_texts(self) -> List[str]:
        return self.noise.legal_texts(self.soup)

    @cached_property
    def json_ld(self) -> list:
        from .extractors.structured_data import structured_data_parser

        return structured_data_parser.json_ld_items(self.html, self.url)

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def visible(self, selector: str) -> List[Tag]:
        """Elements matching selector that are not themselves noise or inside noise."""
        return [el for el in self.soup.select(selector) if not self.noise.is_inside_noise(el)]

    def links(self) -> List[str]:
        """Deduplicated same-origin absolute links, in document order."""
        seen = []
        for a in self.soup.find_all("a", href=True):
            full = resolve_url(a["href"], self.url)
            if full and is_same_origin(full, self.url) and full not in seen:
                seen.append(full)
        return seen
