"""
Extended knowledge: content themes, calls to action, FAQ, certifications, values, paragraphs.
"""
import re
from typing import Dict, List

from ..content_cleaner import is_legal_boilerplate
from ..page import Page, text_of
from .base import unique
from .structured_data import structured_data_parser

CTA_RE = re.compile(
    r"contact|sign up|subscribe|get started|learn more|book|schedule|request|demo|free trial|buy now|add to cart",
    re.I,
)
FAQ_QUESTION_SELECTOR = (
    "[class*='faq'] dt, [id*='faq'] dt, [class*='faq'] h3, [class*='faq'] h4, [class*='faq-question'], "
    "[class*='accordion'] h3, .faq-item h4"
)
CERTIFICATION_SELECTOR = "[class*='certified'], [class*='award'], [class*='accreditation'], [class*='badge']"
VALUES_SELECTOR = "[class*='value'], [class*='mission'], [class*='vision'], [class*='culture'], [class*='community']"

MAX_THEMES = 15
MAX_CTAS = 15
MAX_USPS = 5
MAX_FAQ = 20
MAX_CERTIFICATIONS = 15
MAX_VALUES = 15


class ExtendedExtractor:

    def headings(self, page: Page) -> List[str]:
        return [text for text in (text_of(h) for h in page.select("h1, h2, h3, h4")) if text and len(text) < 150]

    def content_themes(self, page: Page) -> List[str]:
        return self.headings(page)[:MAX_THEMES]

    def ctas(self, page: Page) -> List[str]:
        texts = (text_of(el) for el in page.select("a, button"))
        return unique((t for t in texts if 0 < len(t) < 80 and CTA_RE.search(t)), MAX_CTAS, key=lambda v: v)

    def faq(self, page: Page) -> List[Dict[str, str]]:
        """Structured FAQPage data first, then question elements followed by an answer sibling."""
        pairs = structured_data_parser.faq(page.json_ld)
        for question_el in page.select(FAQ_QUESTION_SELECTOR):
            answer_el = question_el.find_next_sibling(["dd", "p", "div"])
            question, answer = text_of(question_el), text_of(answer_el)
            if question and answer:
                pairs.append({"question": question, "answer": answer})
        seen = set()
        result = []
        for pair in pairs:
            key = pair["question"].lower()
            if key not in seen:
                seen.add(key)
                result.append(pair)
        return result[:MAX_FAQ]

    def certifications(self, page: Page) -> List[str]:
        items = []
        for el in page.select(CERTIFICATION_SELECTOR):
            text = text_of(el)
            img = el.find("img")
            alt = (img.get("alt") if img else None) or el.get("title")
            if text and len(text) < 150:
                items.append(text)
            if alt and len(alt) < 150:
                items.append(alt)
        return unique(items, MAX_CERTIFICATIONS, key=lambda v: v)

    def values(self, page: Page) -> List[str]:
        items = []
        for section in page.select(VALUES_SELECTOR):
            items.extend(t for t in (text_of(h) for h in section.select("h2, h3, h4, li")) if 2 < len(t) < 100)
        return unique(items, MAX_VALUES, key=lambda v: v)

    def paragraphs(self, page: Page, limit: int = 20) -> List[str]:
        """Visible prose paragraphs, falling back to main-body chunks."""
        texts = []
        for p in page.visible("p"):
            text = text_of(p)
            if len(text) > 30 and not is_legal_boilerplate(text):
                texts.append(text)
                if len(texts) >= limit:
                    break
        if not texts:
            texts = [c for c in page.main_chunks if 40 < len(c) < 2000 and not is_legal_boilerplate(c)][:limit]
        return texts


extended_extractor = ExtendedExtractor()
