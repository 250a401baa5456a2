"""
Company facts found in running text: year founded, employee count, legal entity type.
"""
import re
from typing import Optional

from ..field_validators import FieldValidators
from ..page import Page, text_of
from .base import first_result

YEAR_LABEL_RE = re.compile(r"year\s+founded\s*[:=]\s*(\d{4})", re.I)
FOUNDED_IN_RE = re.compile(r"\b(?:founded|established)\s+in\s+(\d{4})\b", re.I)
YEAR_PHRASINGS = [
    YEAR_LABEL_RE,
    re.compile(r"\b(?:founded|established|started|began|incorporated|opened|created)\s*(?:in\s*)?(\d{4})\b", re.I),
    re.compile(r"\b(?:in business|serving|proudly serving|family owned|operating|trading)\s+since\s+(\d{4})\b", re.I),
    re.compile(r"\bsince\s+(\d{4})\b", re.I),
    re.compile(r"\b(?:since|from)\s+(\d{4})\s+(?:to\s+present|to\s+today|-)", re.I),
    re.compile(r"\b(\d{4})\s*[-–]\s*(?:present|today)\b", re.I),
    re.compile(r"\b(?:est\.?|established)\s*\.?\s*(\d{4})\b", re.I),
    re.compile(r"\b(\d{4})\s*[-–]\s*\d{4}\b"),
]
LABEL_HINT_RE = re.compile(r"year\s+founded|founded\s+in|established\s+in|since\s+\d{4}", re.I)
FOUR_DIGITS_RE = re.compile(r"(\d{4})")
COPYRIGHT_RE = re.compile(r"©\s*(?:copyright\s*)?(\d{4})\b", re.I)

ABOUT_SECTIONS = (
    "[class*='about'], [class*='story'], [class*='history'], [class*='heritage'], "
    "[id*='about'], [id*='story'], [id*='history']"
)
COMPANY_SECTIONS = (
    "[class*='about'], [class*='story'], [class*='history'], [class*='company'], [class*='detail']"
)
FOOTERS = "footer, [role='contentinfo'], .footer"

EMPLOYEES_RE = re.compile(
    r"(?:team\s+of\s+)?(\d+)\+?\s*(?:employees?|people|staff|members?)\b|(\d+)\+?\s*-\s*(?:employee|person)\s", re.I
)
LEGAL_ENTITY_RE = re.compile(
    r"\b(LLC|L\.L\.C\.|PLLC|Inc\.|Incorporated|Ltd\.|Limited|Corp\.|Corporation|Co\.|LLP|LP)(?=\W|$)"
)


def _year(pattern: re.Pattern, text: str) -> Optional[str]:
    for match in pattern.finditer(text):
        year = FieldValidators.validate_year(match.group(1))
        if year:
            return year
    return None


def _any_phrasing(text: str) -> Optional[str]:
    for pattern in YEAR_PHRASINGS:
        year = _year(pattern, text)
        if year:
            return year
    return None


class FoundingExtractor:
    """
    Priority: "Year Founded:" label (sections, then main text) -> "founded in" phrasing
    -> secondary phrasings in about sections, footer, main text -> dt/dd pairs
    -> full body -> copyright year
    """

    def extract(self, page: Page) -> dict:
        result = {}
        year = self.extract_year_founded(page)
        if year:
            result["year_founded"] = year
        employees = self.extract_employee_count(page)
        if employees:
            result["employee_count"] = employees
        entity = self.extract_legal_entity_type(page)
        if entity:
            result["legal_entity_type"] = entity
        return result

    def extract_year_founded(self, page: Page) -> Optional[str]:
        strategies = [
            self._label_in_sections,
            self._label_in_main_text,
            self._founded_in,
            self._label_in_list_items,
            self._phrasing_in_about_sections,
            self._phrasing_in_footer,
            self._phrasing_in_main_text,
            self._dt_dd_pairs,
            self._full_body,
            self._copyright,
        ]
        return first_result(strategies, page)

    def _label_in_sections(self, page: Page) -> Optional[str]:
        for el in page.visible(COMPANY_SECTIONS + ", " + FOOTERS):
            year = _year(YEAR_LABEL_RE, text_of(el))
            if year:
                return year
        return None

    def _label_in_main_text(self, page: Page) -> Optional[str]:
        return _year(YEAR_LABEL_RE, page.main_text)

    def _founded_in(self, page: Page) -> Optional[str]:
        for el in page.visible(COMPANY_SECTIONS):
            year = _year(FOUNDED_IN_RE, text_of(el))
            if year:
                return year
        return _year(FOUNDED_IN_RE, page.main_text)

    def _label_in_list_items(self, page: Page) -> Optional[str]:
        for el in page.visible("dt, dd, li, p"):
            text = text_of(el)
            if LABEL_HINT_RE.search(text):
                year = _year(FOUR_DIGITS_RE, text)
                if year:
                    return year
        return None

    def _phrasing_in_about_sections(self, page: Page) -> Optional[str]:
        for el in page.visible(ABOUT_SECTIONS):
            text = text_of(el)
            if len(text) >= 30:
                year = _any_phrasing(text)
                if year:
                    return year
        return None

    def _phrasing_in_footer(self, page: Page) -> Optional[str]:
        for el in page.select(FOOTERS):
            year = _any_phrasing(text_of(el))
            if year:
                return year
        return None

    def _phrasing_in_main_text(self, page: Page) -> Optional[str]:
        return _any_phrasing(page.main_text)

    def _dt_dd_pairs(self, page: Page) -> Optional[str]:
        for dt in page.select("dt"):
            if not re.search(r"year\s+founded|founded|established", text_of(dt), re.I):
                continue
            dd = dt.find_next_sibling("dd")
            if dd is not None:
                year = _year(FOUR_DIGITS_RE, text_of(dd))
                if year:
                    return year
        return None

    def _full_body(self, page: Page) -> Optional[str]:
        return _year(YEAR_LABEL_RE, page.full_text) or _any_phrasing(page.full_text)

    def _copyright(self, page: Page) -> Optional[str]:
        return _year(COPYRIGHT_RE, page.main_text)

    def extract_employee_count(self, page: Page) -> Optional[str]:
        match = EMPLOYEES_RE.search(page.main_text)
        if match:
            return match.group(1) or match.group(2)
        return None

    def extract_legal_entity_type(self, page: Page) -> Optional[str]:
        match = LEGAL_ENTITY_RE.search(page.main_text)
        if match:
            return match.group(1).replace(".", "")
        return None


founding_extractor = FoundingExtractor()
