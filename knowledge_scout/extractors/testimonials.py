"""
Customer testimonials and reviews.
"""
import re
from typing import List, Optional

from ..content_cleaner import clean_text
from ..page import Page, closest, text_of
from .base import first_result
from .structured_data import structured_data_parser

MIN_LENGTH = 15
MAX_LENGTH = 800
MAX_TESTIMONIALS = 15
FINGERPRINT_LENGTH = 80

REVIEW_CONTAINERS = (
    '[class*="testimonial"], [class*="review"], [class*="client-quote"], [class*="rating"], [class*="client"], '
    '[class*="quote"], [class*="social-proof"], [id*="testimonial"], [id*="review"], blockquote'
)
REVIEW_HEADING_RE = re.compile(
    r"review|testimonial|client|what\s+(?:our\s+)?clients?\s+(?:are\s+)?say|kind\s+words|from\s+our\s+clients"
    r"|what\s+people\s+say",
    re.I,
)
RATING_NOISE_RE = re.compile(r"^\d+\s*[/*]|stars?|years?\s+ago|verified|schedule\s+appointment", re.I)
CARD_NOISE_RE = re.compile(r"^\d+\s*/\s*5|^[\d\s*]+$|stars?|years?\s+ago$", re.I)
SENTIMENT_RE = re.compile(
    r"\b(?:rely on|recommend|great|thank you|professional|excellent|happy|satisfied|finally)\b", re.I
)
NAV_START_RE = re.compile(r"^(?:home|about|contact|login|menu|read more)", re.I)
REVIEW_PHRASES = [
    "company you can rely on",
    "highly recommend",
    "would recommend",
    "rely on",
]


def fingerprint(text: str) -> str:
    return clean_text(text)[:FINGERPRINT_LENGTH].lower()


def dedupe_testimonials(quotes, limit: int = MAX_TESTIMONIALS) -> List[str]:
    """Length-bounded quotes, unique by their first 80 characters (case-insensitive)."""
    seen = set()
    result = []
    for quote in quotes:
        quote = clean_text(quote)
        if not MIN_LENGTH <= len(quote) <= MAX_LENGTH:
            continue
        key = fingerprint(quote)
        if key in seen:
            continue
        seen.add(key)
        result.append(quote)
        if len(result) >= limit:
            break
    return result


class TestimonialExtractor:
    """
    Priority: JSON-LD Review -> itemprop microdata -> review-ish containers
    -> section under a "What our clients say" heading -> quote text inside review cards
    -> sentiment paragraphs -> review phrase in the full page text
    """

    def extract(self, page: Page) -> List[str]:
        strategies = [
            self._from_json_ld,
            self._from_microdata,
            self._from_containers,
            self._from_heading_sections,
            self._from_card_quotes,
            self._from_sentiment_paragraphs,
            self._from_full_page,
        ]
        return first_result(strategies, page, validate=dedupe_testimonials) or []

    def _from_json_ld(self, page: Page) -> List[str]:
        return structured_data_parser.reviews(page.json_ld)

    def _from_microdata(self, page: Page) -> List[str]:
        return [text_of(el) for el in page.select('[itemprop="reviewBody"], [itemprop="review"]')]

    def _from_containers(self, page: Page) -> List[str]:
        quotes = []
        for el in page.select(REVIEW_CONTAINERS):
            if page.noise.is_noise(el):
                continue
            text = text_of(el)
            if len(text) > 20:
                quotes.append(text)
        return quotes

    def _from_heading_sections(self, page: Page) -> List[str]:
        quotes = []
        for heading in page.select("h1, h2, h3, h4"):
            if not REVIEW_HEADING_RE.search(text_of(heading)):
                continue
            section = closest(heading, "section, article, div[class]")
            if section is None:
                continue
            for child in section.select("p, blockquote, [class*='quote'], [class*='review'], [class*='content']"):
                text = text_of(child)
                if 20 <= len(text) <= 600 and not RATING_NOISE_RE.search(text[:50]):
                    quotes.append(text)
        return quotes

    def _from_card_quotes(self, page: Page) -> List[str]:
        quotes = []
        for card in page.select('[class*="review"], [class*="testimonial"], [class*="client"]'):
            if page.noise.is_noise(card):
                continue
            for el in card.select('[class*="quote"], [class*="text"], [class*="content"], p'):
                text = text_of(el)
                if 15 <= len(text) <= 500 and not CARD_NOISE_RE.search(text):
                    quotes.append(text)
        return quotes

    def _from_sentiment_paragraphs(self, page: Page) -> List[str]:
        quotes = []
        for p in page.visible("p"):
            text = text_of(p)
            if 25 <= len(text) <= 400 and SENTIMENT_RE.search(text) and not NAV_START_RE.match(text):
                quotes.append(text)
        return quotes

    def _from_full_page(self, page: Page) -> Optional[List[str]]:
        text = page.full_text
        lowered = text.lower()
        for phrase in REVIEW_PHRASES:
            idx = lowered.find(phrase)
            if idx < 0:
                continue
            snippet = text[max(0, idx - 5): idx + len(phrase) + 80].strip()
            snippet = re.sub(r"^[^a-zA-Z]+", "", snippet)
            snippet = re.sub(r"[^a-zA-Z0-9\s',.-]+$", "", snippet)
            if 15 <= len(snippet) <= 300:
                return [snippet]
        return None


testimonial_extractor = TestimonialExtractor()
