"""
Narrative fields: founding story, overview and company pitch.
"""
import re
from typing import Optional

from ..content_cleaner import clean_text, is_legal_boilerplate, looks_like_code_or_css
from ..page import Page, text_of
from .base import first_result

STORY_RE = re.compile(
    r"founder|founding story|founded|started|began|our story|journey|since \d{4}|how we (?:started|began)"
    r"|years of (?:experience|service)|established|opened (?:our|in)|year founded",
    re.I,
)
ABOUT_SECTIONS = (
    "[class*='about'], [id*='about'], [class*='story'], [id*='story'], [class*='history'], [class*='mission'], "
    "[class*='intro'], [class*='who-we'], [class*='founding'], [id*='founding'], [class*='company-detail']"
)
CONTENT_PARAGRAPHS = "main p, article p, [role='main'] p"
HERO_PARAGRAPHS = "main p, article p, [role='main'] p, .hero p, [class*='hero'] p, [class*='intro'] p, [class*='about'] p"
FOUNDER_STARTED_RE = re.compile(
    r"\bfounder\b.*\bstarted\b|\bstarted\s+(?:his|her|their)\s+own\b|\bstarted\s+.*\s+practice\b|\bfounded\b.*\b\d{4}\b",
    re.I,
)
FOUNDER_SENTENCE_RE = re.compile(
    r"\b(?:Founder\s+\w+\s+\w+\s+started|started\s+(?:his|her|their)\s+own\s+\w+\s+practice)\b", re.I
)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
NAV_START_RE = re.compile(r"^(?:home|about|contact|login|sign|menu|privacy|terms)", re.I)
DESCRIPTIVE_RE = re.compile(r"specialize|provide|offer|serve|help|assist|dedicated|focused|expert|experience|years", re.I)

STORY_LIMIT = 1500
OVERVIEW_LIMIT = 800
COMPREHENSIVE_LIMIT = 1000
PITCH_LIMIT = 500


def _narrative(text: str) -> bool:
    return not is_legal_boilerplate(text) and not looks_like_code_or_css(text)


def _with_following_paragraphs(el, count: int = 2) -> str:
    following = " ".join(text_of(p) for p in el.find_next_siblings("p", limit=count))
    return clean_text(f"{text_of(el)} {following}")


class AboutExtractor:
    """Founding story, overview and pitch from about/story sections and hero copy."""

    def extract(self, page: Page) -> dict:
        result = {}
        story = self.extract_founding_story(page)
        if story:
            result["founding_story"] = story
        overview = self.extract_overview(page)
        if overview:
            result["overview"] = overview
        return result

    # --- founding story ---

    def extract_founding_story(self, page: Page) -> Optional[str]:
        strategies = [
            self._story_from_about_sections,
            self._story_from_content_paragraphs,
            self._story_from_founder_paragraph,
            self._story_from_main_chunks,
            self._story_from_full_page,
        ]
        story = first_result(strategies, page)
        return story[:STORY_LIMIT].strip() if story else None

    def _story_from_about_sections(self, page: Page) -> Optional[str]:
        for el in page.visible(ABOUT_SECTIONS):
            text = text_of(el)
            if len(text) < 100 or len(text) > 5000 or not _narrative(text):
                continue
            if STORY_RE.search(text):
                return text
        return None

    def _story_from_content_paragraphs(self, page: Page) -> Optional[str]:
        for p in page.visible(CONTENT_PARAGRAPHS):
            text = text_of(p)
            if 80 <= len(text) <= 1500 and _narrative(text) and STORY_RE.search(text):
                return _with_following_paragraphs(p)
        return None

    def _story_from_founder_paragraph(self, page: Page) -> Optional[str]:
        for p in page.visible("body p"):
            text = text_of(p)
            if 80 <= len(text) <= 2500 and _narrative(text) and FOUNDER_STARTED_RE.search(text) and YEAR_RE.search(text):
                return _with_following_paragraphs(p)
        return None

    def _story_from_main_chunks(self, page: Page) -> Optional[str]:
        for chunk in page.main_chunks:
            if len(chunk) < 80 or len(chunk) > 2500 or not _narrative(chunk):
                continue
            if STORY_RE.search(chunk):
                return chunk
        return None

    def _story_from_full_page(self, page: Page) -> Optional[str]:
        """Unfiltered page text, used only for an explicit 'Founder X Y started' sentence."""
        text = page.full_text
        match = FOUNDER_SENTENCE_RE.search(text)
        if not match:
            return None
        window = text[match.start(): match.start() + 1100]
        last_period = window.rfind(".")
        story = (window[: last_period + 1] if last_period > 150 else window).strip()
        if len(story) >= 100 and YEAR_RE.search(story) and not is_legal_boilerplate(story):
            return story
        return None

    # --- overview ---

    def extract_overview(self, page: Page) -> Optional[str]:
        for el in page.visible(ABOUT_SECTIONS):
            text = text_of(el)
            if 80 < len(text) <= 5000 and _narrative(text):
                return text[:OVERVIEW_LIMIT]
        first_chunk = page.main_text[:1500]
        if len(first_chunk) > 80 and _narrative(first_chunk):
            return first_chunk[:OVERVIEW_LIMIT]
        return None

    def hero_paragraphs(self, page: Page) -> list:
        paragraphs = []
        for p in page.soup.select(HERO_PARAGRAPHS)[:5]:
            if page.noise.is_inside_noise(p):
                continue
            text = text_of(p)
            if 60 <= len(text) <= 500 and not NAV_START_RE.match(text[:30]) and DESCRIPTIVE_RE.search(text):
                if not any(text[:50] in existing for existing in paragraphs):
                    paragraphs.append(text)
        return paragraphs

    def comprehensive_overview(
        self,
        page: Page,
        name: str,
        description: str,
        industry: Optional[str] = None,
        location: Optional[str] = None,
        year_founded: Optional[str] = None,
    ) -> Optional[str]:
        """
        A few composed sentences: who/where, since when, what they do, whom they serve.
        Falls back to the meta description, then the about overview.
        """
        main_text = page.main_text
        sentences = []
        if name and location:
            sentences.append(f"{name} is based in {location}.")
        if year_founded:
            sentences.append(f"Operating since {year_founded}.")
        if re.search(r"family[-\s]?(?:owned|operated)", main_text, re.I):
            sentences.append("A family-owned and operated company.")

        paragraphs = self.hero_paragraphs(page)
        if description and len(description) >= 60 and not re.search(r"cookie|privacy policy", description, re.I):
            paragraphs.insert(0, description)
        if paragraphs:
            sentences.append(paragraphs[0])
        elif industry:
            sentences.append(f"Specializing in {industry.lower()}.")

        serves = re.search(r"(?:serves?|caters? to|works? with)\s+([^.,]{5,150})", main_text, re.I)
        if serves:
            target = clean_text(serves.group(1))
            if target.lower()[:20] not in " ".join(sentences).lower():
                sentences.append(f"The company serves {target}.")
        experience = re.search(r"(\d+)\s+years?\s+of\s+(?:experience|service|expertise)", main_text, re.I)
        if experience:
            sentences.append(f"It brings {experience.group(0)}.")

        overview = clean_text(" ".join(sentences))
        if len(overview) < 80:
            overview = description if description and len(description) >= 60 else ""
        if not overview:
            overview = self.extract_overview(page) or ""
        return overview[:COMPREHENSIVE_LIMIT] or None

    # --- pitch ---

    def extract_pitch(self, page: Page, description: str) -> Optional[str]:
        parts = []
        if description and len(description) >= 40:
            parts.append(description[:300])
        h1 = text_of(page.soup.find("h1"))
        if 10 < len(h1) < 200 and not any(h1 in part for part in parts):
            parts.append(h1)
        for p in page.soup.select("main p, article p, [role='main'] p, .hero p, [class*='hero'] p")[:3]:
            if page.noise.is_inside_noise(p):
                continue
            text = text_of(p)
            if 40 <= len(text) <= 400 and not NAV_START_RE.match(text[:20]):
                if not any(text[:50] in part for part in parts):
                    parts.append(text)
        if len(parts) < 2 and page.main_chunks:
            first = next((c for c in page.main_chunks if len(c) >= 40 and _narrative(c)), None)
            if first and first not in parts:
                parts.append(first)
        pitch = clean_text(" ".join(parts))
        return pitch[:PITCH_LIMIT].strip() or None


about_extractor = AboutExtractor()
