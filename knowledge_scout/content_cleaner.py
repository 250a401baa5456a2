"""
Content Cleaner - shared text normalisation and boilerplate detection.
Every extractor runs its candidate strings through these helpers before accepting them.
"""
import re
from typing import Optional

import trafilatura
from trafilatura.settings import use_config

from .utils import logger

WHITESPACE_RE = re.compile(r"\s+")

LEGAL_RE = re.compile(
    r"terms of service|privacy policy|effective:\s*\w+|by using our (?:services|site)|disclaimer"
    r"|copyright\s*©|all rights reserved",
    re.I,
)

CODE_RE = re.compile(
    r"\[data-[a-z-]+[^\]]*\]|\{[^}]*\}|transition-duration|font-family\s*:|padding\s*:|margin\s*:"
    r"|#[0-9a-fA-F]{3,6}\b|\.\d+px|rgba?\s*\(",
    re.I,
)
CSS_UNIT_RE = re.compile(r"\b(?:px|em|rem|ms|vh|vw)\s*[;}]")


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and trim."""
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def looks_like_code_or_css(text: str) -> bool:
    """True for strings that are really stylesheet or markup residue."""
    if CODE_RE.search(text) or CSS_UNIT_RE.search(text):
        return True
    return "{" in text and "}" in text


def is_legal_boilerplate(text: str) -> bool:
    return bool(LEGAL_RE.search(text))


class ContentCleaner:
    """Main-content extraction for pages where the DOM heuristics come up short."""

    def __init__(self):
        self.config = use_config()
        self.config.set("DEFAULT", "MIN_EXTRACTED_SIZE", "100")
        self.config.set("DEFAULT", "MIN_OUTPUT_SIZE", "50")

    def extract_clean_content(self, html: str, url: str = None) -> str:
        """
        Extract the main prose of a page, dropping navigation, ads and footers.

        Args:
            html: Raw HTML content
            url: Optional URL for better extraction

        Returns:
            Whitespace-collapsed text, or empty string if nothing usable was found
        """
        if not html:
            return ""

        try:
            text = trafilatura.extract(
                html,
                url=url,
                config=self.config,
                include_comments=False,
                include_tables=False,
                include_images=False,
                include_formatting=False,
                include_links=False,
                favor_precision=True,
                with_metadata=False,
            )
        except Exception as e:
            logger.warning(f"Trafilatura extraction failed for {url}: {e}")
            return ""

        return clean_text(text)


# Global instance for easy access
content_cleaner = ContentCleaner()
