"""
Field Validators for knowledge record values.
Shape checks every extractor applies before accepting a candidate.
"""
import re
from datetime import datetime
from typing import Optional

import phonenumbers
from email_validator import EmailNotValidError, validate_email

from .content_cleaner import clean_text

# Street number + street type + city, ST 12345
US_ADDRESS_RE = re.compile(
    r"\d+[\s\w.#]+(?:street|st\.?|avenue|ave\.?|blvd\.?|boulevard|drive|dr\.?|road|rd\.?|lane|ln\.?|way"
    r"|suite|ste\.?|floor|fl\.?|building|bldg\.?)[\s\w.]*,?\s*[^,]+,\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?",
    re.I,
)
US_ADDRESS_LOOSE_RE = re.compile(r"\d+\s+[\w\s.#]+,\s*[^,]+,\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?")
US_ADDRESS_ANY_RE = re.compile(r"\d+[\s\w.#]{3,40},\s*[^,]{2,30},\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?")
# "Boynton Beach, Florida 33437"
US_CITY_STATE_ZIP_RE = re.compile(r"[A-Za-z][A-Za-z\s\-']{2,45},\s*[A-Za-z]+(?:\s+[A-Za-z]+)?\s+\d{5}(?:-\d{4})?")

US_STATES = (
    "AL|AK|AZ|AR|CA|CO|CT|DE|DC|FL|GA|HI|ID|IL|IN|IA|KS|KY|LA|ME|MD|MA|MI|MN|MS|MO|MT|NE|NV|NH|NJ|NM|NY|NC"
    "|ND|OH|OK|OR|PA|RI|SC|SD|TN|TX|UT|VT|VA|WA|WV|WI|WY"
)
# "8630 W Sunrise Blvd Plantation FL 33322" (no commas)
US_STREET_STATE_ZIP_RE = re.compile(rf"\d+[\s\w.#]+\b(?:{US_STATES})\s+\d{{5}}(?:-\d{{4}})?")

ADDRESS_SHAPES = (US_ADDRESS_RE, US_ADDRESS_LOOSE_RE, US_ADDRESS_ANY_RE, US_CITY_STATE_ZIP_RE, US_STREET_STATE_ZIP_RE)

NAV_WORDS_RE = re.compile(
    r"\b(?:home|about us|services|contact us|login|sign (?:up|in)|directory|track your refund|learning"
    r"|learn more|menu|client (?:login|hub)|schedule)\b",
    re.I,
)


class FieldValidators:
    """Validates and cleans extracted knowledge fields."""

    NOT_A_PERSON = [
        "contact form", "ready to", "water drilling", "since 19", "since 20",
        "learn more", "schedule", "get in touch", "our services", "join our", "well drilling",
        "well inspection", "pumping systems", "water well", "public supply", "experience the",
        "the difference", "client login", "schedule appointment",
        "request a quote", "read more", "see all", "why ", "our well", "well maintenance",
    ]
    NOT_A_PERSON_START_RE = re.compile(
        r"^(?:water|well|pumping|public|our|the|why|join|schedule|contact|ready|learn|see|get|request)\s", re.I
    )
    NOT_A_PERSON_END_RE = re.compile(
        r"\s(?:drilling|inspection|systems|services|form|appointment|newsletter|difference)$", re.I
    )
    NAV_LABEL_RE = re.compile(
        r"^(?:home|about|contact|services|our team|menu|login|sign|faq|blog|read more|learn more"
        r"|view profile|see all|follow|subscribe)$",
        re.I,
    )
    PLACE_WORD_RE = re.compile(
        r"\b(?:valley|hills|beach|city|town|area|park|lake|springs|heights|village|hill\s+country)\b", re.I
    )
    PLACE_NAME_RE = re.compile(r"^(?:locations?|offices?|areas?|services?|headquarters|downtown)$", re.I)

    @classmethod
    def person_key(cls, name: str) -> str:
        """Dedup key: lowercased, whitespace collapsed."""
        return clean_text(name).lower()

    @classmethod
    def looks_like_place(cls, name: str) -> bool:
        text = name.strip()
        if re.search(r"\s", text):
            return bool(cls.PLACE_WORD_RE.search(text))
        return bool(cls.PLACE_NAME_RE.match(text))

    @classmethod
    def is_not_a_person(cls, name: str) -> bool:
        text = clean_text(name).lower()
        if re.search(r"\d", text):
            return True
        words = text.split()
        if len(words) < 2 or len(words) > 4:
            return True
        if any(phrase in text for phrase in cls.NOT_A_PERSON):
            return True
        return bool(cls.NOT_A_PERSON_START_RE.match(text) or cls.NOT_A_PERSON_END_RE.search(text))

    @classmethod
    def validate_person_name(cls, name: str) -> Optional[str]:
        """Cleaned name when it plausibly names a person, else None."""
        if not name:
            return None
        name = clean_text(name)
        if len(name) < 2 or len(name) > 80:
            return None
        if cls.NAV_LABEL_RE.match(name) or cls.looks_like_place(name) or cls.is_not_a_person(name):
            return None
        return name

    @classmethod
    def normalize_phone(cls, raw: str) -> Optional[str]:
        """
        (AAA) BBB-CCCC when exactly ten digits are recoverable (an eleven digit number
        with a leading 1 counts); anything else is returned as given.
        """
        if not raw:
            return None
        value = re.sub(r"^tel:", "", raw.strip(), flags=re.I).strip()
        digits = re.sub(r"\D", "", value)
        if len(digits) == 11 and digits.startswith("1"):
            digits = digits[1:]
        if len(digits) == 10:
            return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
        return value or None

    @classmethod
    def find_phone_in_text(cls, text: str, region: str = "US") -> Optional[str]:
        """First number of at least ten digits in free text, normalized."""
        if not text:
            return None
        for match in phonenumbers.PhoneNumberMatcher(text, region, leniency=phonenumbers.Leniency.POSSIBLE):
            if len(re.sub(r"\D", "", match.raw_string)) >= 10:
                return cls.normalize_phone(match.raw_string)
        return None

    @classmethod
    def validate_email(cls, email: str) -> Optional[str]:
        """Syntax-checked address, or None."""
        if not email or len(email) >= 120:
            return None
        try:
            return validate_email(email.strip(), check_deliverability=False).normalized
        except EmailNotValidError:
            return None

    @classmethod
    def validate_year(cls, value) -> Optional[str]:
        """First four-digit run of value, if 1900 <= year <= next year."""
        if value is None:
            return None
        match = re.search(r"\d{4}", str(value))
        if not match:
            return None
        year = int(match.group(0))
        if 1900 <= year <= datetime.now().year + 1:
            return match.group(0)
        return None

    @classmethod
    def looks_like_nav_not_address(cls, text: str) -> bool:
        if re.search(r"\d{5}(?:-\d{4})?", text) and re.search(r",\s*[A-Za-z]+(?:\s+[A-Za-z]+)?\s+\d{5}", text):
            return False
        return bool(NAV_WORDS_RE.search(text)) or (len(text.split()) <= 4 and not re.search(r"\d{5}", text))

    @classmethod
    def match_address(cls, text: str, patterns=ADDRESS_SHAPES) -> Optional[str]:
        """First substring of text matching one of the postal-address shapes, in pattern order."""
        if not text:
            return None
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                candidate = clean_text(match.group(0))[:200]
                if not cls.looks_like_nav_not_address(candidate):
                    return candidate
        return None

    @classmethod
    def validate_address(cls, text: str) -> Optional[str]:
        """Whole value if it contains a postal-address shape and is not navigation text."""
        text = clean_text(text)[:200]
        if not text or cls.looks_like_nav_not_address(text):
            return None
        if any(pattern.search(text) for pattern in ADDRESS_SHAPES):
            return text
        return None
