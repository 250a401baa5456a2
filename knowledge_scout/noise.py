"""
Visibility / noise classification.
Decides which elements count as page content and which are modals, legal notices,
cookie banners or hidden-by-style clutter.
"""
import re
from typing import List

from bs4 import BeautifulSoup, Tag

from .page import class_and_id, closest, text_of


class NoiseClassifier:
    NOISE_RE = re.compile(r"modal|jetstream|terms|privacy|legal|disclaimer|accessibility\s*statement", re.I)
    LEGAL_RE = re.compile(r"terms|privacy|legal|disclaimer|accessibility\s*statement", re.I)

    # Hidden content inside these containers is collapsed UI (bios, tabs), not noise
    REVEAL_CONTAINERS = (
        "[class*='team'], [class*='about'], [class*='accordion'], [class*='collapse'], "
        "[class*='tab-content'], [class*='carousel'], [class*='slider']"
    )

    STRICT_REMOVE = (
        "[class*='modal'], [id*='modal'], [class*='jetstream'], [class*='cookie'], [id*='cookie'], "
        "[class*='gdpr'], [class*='consent'], [id*='consent']"
    )
    HIDDEN_REMOVE = "[style*='display:none'], [style*='display: none']"
    MIN_STRICT_TEXT = 150

    BLOCK_TAGS = [
        "p", "li", "blockquote", "dd", "dt", "td", "th", "div", "section", "article",
        "h1", "h2", "h3", "h4", "h5", "h6",
    ]

    TESTIMONIAL_CONTAINERS = "[class*='testimonial'], [class*='review']"
    TESTIMONIAL_HEADING_RE = re.compile(r"what\s+our\s+clients\s+(?:are\s+)?say|testimonial|^reviews?$", re.I)

    @staticmethod
    def _is_display_none(el: Tag) -> bool:
        style = (el.get("style") or "").lower()
        return "display:none" in style or "display: none" in style

    def is_noise(self, el) -> bool:
        if not isinstance(el, Tag):
            return False
        if self.NOISE_RE.search(class_and_id(el)):
            return True
        if self._is_display_none(el):
            return closest(el, self.REVEAL_CONTAINERS) is None
        return False

    def is_inside_noise(self, el) -> bool:
        """True if the element or any ancestor is noise."""
        current = el
        while isinstance(current, Tag):
            if self.is_noise(current):
                return True
            current = current.parent
        return False

    def is_legal_container(self, el: Tag) -> bool:
        return bool(self.LEGAL_RE.search(class_and_id(el)))

    def legal_texts(self, soup: BeautifulSoup) -> List[str]:
        """Text of each outermost legal/terms/privacy container on the page."""
        texts = []
        for el in soup.find_all(True):
            if not self.is_legal_container(el):
                continue
            if any(isinstance(p, Tag) and self.is_legal_container(p) for p in el.parents):
                continue
            texts.append(text_of(el))
        return texts

    def is_inside_testimonial(self, el) -> bool:
        """True inside review blocks, so quoted customers are not mistaken for staff."""
        if not isinstance(el, Tag):
            return False
        if closest(el, self.TESTIMONIAL_CONTAINERS) is not None:
            return True
        parent = el.parent
        while isinstance(parent, Tag):
            for heading in parent.find_all(["h1", "h2", "h3", "h4"], recursive=False):
                if self.TESTIMONIAL_HEADING_RE.search(text_of(heading)):
                    return True
            parent = parent.parent
        return False

    def _stripped_body(self, soup: BeautifulSoup, remove_selector: str) -> Tag:
        clone = BeautifulSoup(str(soup), "lxml")
        body = clone.body or clone
        for element in body(["script", "style", "noscript"]):
            element.decompose()
        for element in body.select(remove_selector):
            if not element.decomposed:
                element.decompose()
        return body

    def main_body_text(self, soup: BeautifulSoup) -> str:
        """
        Visible text of the page body.

        Strict pass drops modals and cookie/consent containers; when that leaves fewer
        than MIN_STRICT_TEXT characters the loose pass (only display:none removed) is used.
        """
        text = text_of(self._stripped_body(soup, self.STRICT_REMOVE))
        if len(text) < self.MIN_STRICT_TEXT:
            text = text_of(self._stripped_body(soup, self.HIDDEN_REMOVE))
        return text

    def main_body_chunks(self, soup: BeautifulSoup) -> List[str]:
        """Text of each innermost block element of the strict main body, in document order."""
        body = self._stripped_body(soup, self.STRICT_REMOVE)
        chunks = []
        for el in body.find_all(self.BLOCK_TAGS):
            if el.find(self.BLOCK_TAGS) is None:
                text = text_of(el)
                if text:
                    chunks.append(text)
        return chunks


noise_classifier = NoiseClassifier()
