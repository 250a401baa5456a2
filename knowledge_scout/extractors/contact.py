"""
Contact details: email, phone and primary postal address.
"""
import re
from typing import List, Optional

from ..content_cleaner import clean_text
from ..field_validators import (
    FieldValidators,
    US_ADDRESS_ANY_RE,
    US_ADDRESS_LOOSE_RE,
    US_ADDRESS_RE,
    US_CITY_STATE_ZIP_RE,
    US_STREET_STATE_ZIP_RE,
)
from ..page import Page, text_of
from .base import first_result

CONTACT_SECTIONS = (
    "[class*='contact'], [id*='contact'], [class*='address'], [id*='address'], footer, .footer"
)
ADDRESS_LABEL_RE = re.compile(r"(?:main\s+)?address\s*[:=]\s*([^|]+?)(?:\s*\||$)", re.I)
EXCLUDED_MAILBOXES = ("legal@", "privacy@", "abuse@", "dmca@")


class ContactExtractor:
    """
    Address priority: schema.org itemprop -> "Address:" label -> map links -> <address>
    -> contact/footer sections -> main text -> full page (legal context rejected)
    """

    def __init__(self, legal_boilerplate_phrases: Optional[List[str]] = None):
        phrases = legal_boilerplate_phrases or ["legal@", "Terms of Service", "Privacy Policy", "Copyright Agent"]
        self.boilerplate_re = re.compile("|".join(re.escape(p) for p in phrases), re.I)

    def extract(self, page: Page) -> dict:
        result = {
            "email": self.extract_email(page),
            "phone": self.extract_phone(page),
            "main_address": self.extract_address(page),
        }
        return {k: v for k, v in result.items() if v}

    # --- email / phone ---

    def extract_email(self, page: Page) -> Optional[str]:
        for link in page.visible('a[href^="mailto:"]'):
            address = re.sub(r"^mailto:", "", link["href"], flags=re.I).split("?")[0].strip()
            if any(mailbox in address.lower() for mailbox in EXCLUDED_MAILBOXES):
                continue
            email = FieldValidators.validate_email(address)
            if email:
                return email
        return None

    def extract_phone(self, page: Page) -> Optional[str]:
        links = page.visible('a[href^="tel:"]') or page.select('a[href^="tel:"]')
        for link in links:
            phone = FieldValidators.normalize_phone(link["href"])
            if phone:
                return phone
        return None

    # --- address ---

    def extract_address(self, page: Page) -> Optional[str]:
        strategies = [
            self._from_itemprop,
            self._from_label,
            self._from_map_links,
            self._from_address_tags,
            self._from_contact_sections,
            self._from_main_text,
            self._from_full_page,
        ]
        return first_result(strategies, page, validate=lambda value: self._outside_legal(value, page))

    def _from_itemprop(self, page: Page) -> Optional[str]:
        for el in page.visible("[itemprop='address']"):
            text = text_of(el)
            if 10 <= len(text) <= 350:
                address = FieldValidators.match_address(text)
                if address:
                    return address
        return None

    def _from_label(self, page: Page) -> Optional[str]:
        for el in page.visible(CONTACT_SECTIONS + ", [class*='company-detail']"):
            match = ADDRESS_LABEL_RE.search(text_of(el))
            if match:
                address = FieldValidators.match_address(match.group(1))
                if address:
                    return address
        return None

    def _from_map_links(self, page: Page) -> Optional[str]:
        for link in page.visible("a[href*='maps'], a[href*='map'], a[href*='goo.gl']"):
            text = text_of(link)
            if len(text) < 250:
                address = FieldValidators.match_address(text)
                if address:
                    return address
        return None

    def _from_address_tags(self, page: Page) -> Optional[str]:
        for el in page.visible("address"):
            text = text_of(el)
            if 15 < len(text) < 350:
                address = FieldValidators.match_address(text)
                if address:
                    return address
        return None

    def _from_contact_sections(self, page: Page) -> Optional[str]:
        sections = page.visible(CONTACT_SECTIONS)
        # strict and loose street shapes first across every section, city/state/ZIP only after
        for patterns in ((US_ADDRESS_RE, US_ADDRESS_LOOSE_RE), (US_CITY_STATE_ZIP_RE,)):
            for el in sections:
                address = FieldValidators.match_address(text_of(el), patterns)
                if address:
                    return address
        return None

    def _from_main_text(self, page: Page) -> Optional[str]:
        text = page.main_text
        for patterns in (
            (US_ADDRESS_RE, US_ADDRESS_LOOSE_RE),
            (US_STREET_STATE_ZIP_RE,),
            (US_ADDRESS_ANY_RE,),
            (US_CITY_STATE_ZIP_RE,),
        ):
            address = FieldValidators.match_address(text, patterns)
            if address:
                return address
        return None

    def _from_full_page(self, page: Page) -> Optional[str]:
        """Last resort over the unfiltered page; surrounding legal boilerplate disqualifies a match."""
        text = page.full_text
        address = FieldValidators.match_address(text)
        if not address:
            return None
        idx = text.find(address)
        surrounding = text[max(0, idx - 120): idx + len(address) + 120]
        if self.boilerplate_re.search(surrounding):
            return None
        return address

    def _outside_legal(self, address: str, page: Page) -> Optional[str]:
        """Rejects addresses that only occur inside terms/privacy/legal containers."""
        inside_legal = sum(text.count(address) for text in page.legal_texts)
        if inside_legal and page.full_text.count(address) <= inside_legal:
            return None
        return clean_text(address)[:200]


contact_extractor = ContactExtractor()
