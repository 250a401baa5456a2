"""
Key people extraction from team, leadership and about sections.
"""
import re
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from ..content_cleaner import clean_text
from ..field_validators import FieldValidators
from ..page import Page, closest, is_same_origin, resolve_url, text_of

HIGH_CONFIDENCE_SECTIONS = (
    "[class*='team'], [class*='staff'], [class*='leadership'], [class*='our-team'], [class*='meet-the'], "
    "[class*='key-people'], [class*='agent'], [class*='partner'], "
    "[id*='team'], [id*='leadership'], [id*='staff'], [id*='agent']"
)
OTHER_SECTIONS = (
    "[class*='about'], [class*='people'], [class*='member'], [class*='employee'], [class*='profile'], "
    "[class*='bio'], [class*='board'], [class*='management'], [class*='executive'], [class*='crew'], "
    "[class*='who-we'], [id*='about'], [id*='people']"
)
CARD_SELECTOR = (
    "[class*='card'], [class*='item'], [class*='member'], [class*='person'], [class*='agent'], "
    "[class*='partner'], figure, [class*='profile-card']"
)
NAME_SELECTOR = "h2, h3, h4, h5, .name, [class*='name'], [class*='person-name'], strong"
TITLE_SELECTOR = "[class*='title'], [class*='role'], .title, .role"
BIO_SELECTOR = "[class*='bio'], [class*='description'], [class*='about'], [class*='content']"
NARRATIVE_SECTIONS = (
    "[class*='about'], [class*='team'], [class*='leadership'], [class*='staff'], [id*='about'], [id*='team']"
)
BIO_SECTIONS = (
    "[class*='team'], [class*='staff'], [class*='leadership'], [class*='about'], [class*='people'], "
    "[class*='member'], [class*='profile'], [class*='bio'], [class*='board'], [class*='management'], "
    "[class*='executive']"
)
BIO_CARD_SELECTOR = "[class*='card'], [class*='item'], [class*='member'], [class*='person']"

TITLE_IN_TEXT_RE = re.compile(
    r"\b(?:CEO|CFO|CTO|COO|President|Director|Manager|Lead|Founding Partner|Founder|Owner|Partner|CPA|VP"
    r"|Vice President|Head of|Chief|Consultant|Specialist|Coordinator|Engineer|Technician|Analyst)\b[\s\w\-&]*",
    re.I,
)
SENIOR_TITLE_RE = re.compile(r"founder|owner|partner|cpa|ceo|cto|president|director|manager|agent|chief", re.I)
DASH_SPLIT_RE = re.compile(r"^(.+?)\s+[—–\-]\s+(.+)$")
COMMA_SPLIT_RE = re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2})\s*,\s*(.+)$")
DASH_LINE_RE = re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2})\s+[—–\-]\s+(.{2,80})$")
COMMA_LINE_RE = re.compile(r"^([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2})\s*,\s*(.{2,80})$")
TITLE_NAME_RE = re.compile(
    r"\b(Founder|Owner|President|CEO|CTO|COO|Partner|Director|Manager|Lead)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+){0,2})\b"
)
NAME_TITLE_RE = re.compile(
    r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2})\s+(?:is\s+)?(?:a\s+)?(?:the\s+)?"
    r"([Ff]ounder|[Oo]wner|[Pp]resident|CEO|CTO|[Pp]artner|[Dd]irector|[Mm]anager)\b"
)
BUTTON_TEXT_RE = re.compile(r"^(?:read bio|contact|email|phone)", re.I)
BIO_LINK_TEXT_RE = re.compile(r"read\s+bio|view\s+bio|full\s+bio|learn\s+more|see\s+full|profile|about\s+them", re.I)
BIO_LINK_HREF_RE = re.compile(r"team|about|leadership|staff|profile|bio", re.I)

MAX_PEOPLE = 30
DESCRIPTION_LIMIT = 600


def split_name_title(raw: str) -> Tuple[str, Optional[str]]:
    """'Jane Doe - CEO' or 'Jane Doe, Founder' -> (name, title)."""
    text = clean_text(raw)
    match = DASH_SPLIT_RE.match(text)
    if match:
        name, title = clean_text(match.group(1)), clean_text(match.group(2))
        if 2 <= len(name) <= 60 and 2 <= len(title) <= 80:
            return name, title
    match = COMMA_SPLIT_RE.match(text)
    if match:
        name, title = clean_text(match.group(1)), clean_text(match.group(2))
        if 4 <= len(name) <= 50 and 2 <= len(title) <= 80 and SENIOR_TITLE_RE.search(title):
            return name, title
    return text, None


def contact_from_container(container: Tag) -> Dict[str, str]:
    """Email and phone found inside a person card or its parent block."""
    result = {}
    for link in container.select('a[href^="mailto:"]'):
        email = FieldValidators.validate_email(re.sub(r"^mailto:", "", link["href"], flags=re.I).split("?")[0])
        if email:
            result["email"] = email
            break
    for link in container.select('a[href^="tel:"]'):
        if len(re.sub(r"\D", "", link["href"])) >= 10:
            result["phone"] = FieldValidators.normalize_phone(link["href"])
            break
    if "phone" not in result:
        phone = FieldValidators.find_phone_in_text(text_of(container))
        if phone:
            result["phone"] = phone
    return result


def bio_from_container(container: Tag, name: str) -> Optional[str]:
    """Longest bio-like block in a card, else its paragraphs, else leftover card text."""
    best = ""
    for el in container.select(BIO_SELECTOR):
        text = text_of(el)
        if 30 < len(text) < 2000 and not text.startswith(name) and not BUTTON_TEXT_RE.match(text[:30]):
            if len(text) > len(best):
                best = text
    if best:
        return best[:DESCRIPTION_LIMIT]

    first_name = name.lower().split(" ")[0]
    paragraphs = [
        text for text in (text_of(p) for p in container.find_all("p"))
        if 40 < len(text) < 1500 and not re.match(r"^[\d\-.\s()]+$", text) and not text.lower().startswith(first_name)
    ]
    if paragraphs:
        return " ".join(paragraphs)[:DESCRIPTION_LIMIT]

    for sibling in container.find_next_siblings():
        text = text_of(sibling)
        if 50 < len(text) < 2000 and not BUTTON_TEXT_RE.match(text[:40]) and len(text) > len(best):
            best = text
    if best:
        return best[:DESCRIPTION_LIMIT]

    name_re = r"\s+".join(re.escape(part) for part in name.split())
    leftover = re.sub(name_re, "", text_of(container), flags=re.I)
    leftover = re.sub(r"\S+@\S+\.\S+", "", leftover)
    leftover = re.sub(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b", "", leftover)
    leftover = clean_text(re.sub(r"read bio|learn more|contact|email|phone", "", leftover, flags=re.I))
    if len(leftover) > 50:
        return leftover[:DESCRIPTION_LIMIT]
    return None


class PeopleCollector:
    """Accumulates validated, deduplicated people in discovery order."""

    def __init__(self):
        self.people: List[Dict[str, str]] = []
        self.seen = set()

    def __len__(self):
        return len(self.people)

    def add(self, name: str, title: str = None, description: str = None, email: str = None, phone: str = None):
        name = FieldValidators.validate_person_name(name)
        if not name:
            return
        key = FieldValidators.person_key(name)
        if key in self.seen:
            return
        self.seen.add(key)

        if not title and description:
            match = TITLE_IN_TEXT_RE.search(description)
            if match:
                title = clean_text(match.group(0))
        description = clean_text(description)[:DESCRIPTION_LIMIT] if description else None
        if description and (len(description) < 25 or description.lower() == key):
            description = None

        person = {"name": name, "title": title, "description": description, "email": email, "phone": phone}
        self.people.append({k: v for k, v in person.items() if v})


class PeopleExtractor:
    """
    Confidence tiers, each run only while fewer people than its threshold have been found:
    team-section cards -> other people-ish sections (<3) -> any h3-h5 (none yet)
    -> name heading beside email/phone (none yet) -> "Name - Title" lines (<3) -> narrative (<5)
    """

    def extract(self, page: Page) -> List[Dict[str, str]]:
        collector = PeopleCollector()
        tiers = [
            (self._high_confidence_sections, None),
            (self._other_sections, 3),
            (self._heading_scan, 1),
            (self._headings_with_contact, 1),
            (self._name_title_lines, 3),
            (self._narrative, 5),
        ]
        for tier, threshold in tiers:
            if threshold is None or len(collector) < threshold:
                tier(page, collector)
        return collector.people[:MAX_PEOPLE]

    def _process_section(self, page: Page, section: Tag, collector: PeopleCollector):
        if page.noise.is_noise(section):
            return
        for card in section.select(CARD_SELECTOR):
            if page.noise.is_inside_testimonial(card):
                continue
            name_el = card.select_one(NAME_SELECTOR)
            if name_el is None:
                continue
            name, dash_title = split_name_title(text_of(name_el))
            if not 2 <= len(name) <= 80:
                continue
            contact = contact_from_container(card)
            title_el = card.select_one(TITLE_SELECTOR)
            title = (text_of(title_el) if title_el is not None else None) or dash_title
            collector.add(name, title, bio_from_container(card, name), contact.get("email"), contact.get("phone"))

        # Headings outside any card
        for el in section.select(NAME_SELECTOR + ", dt"):
            if page.noise.is_inside_testimonial(el) or closest(el, CARD_SELECTOR) is not None:
                continue
            raw = text_of(el)
            name, dash_title = split_name_title(raw)
            if not 2 <= len(name) <= 80:
                continue
            parent = el.parent
            contact = contact_from_container(parent)
            next_el = el.find_next_sibling()
            next_text = text_of(next_el) if next_el is not None else ""
            description = next_text if len(next_text) > 15 else text_of(parent).replace(raw, "").strip()
            bio = bio_from_container(parent, name) or (description[:DESCRIPTION_LIMIT] if len(description) > 20 else None)
            collector.add(name, dash_title, bio, contact.get("email"), contact.get("phone"))

    def _high_confidence_sections(self, page: Page, collector: PeopleCollector):
        for section in page.select(HIGH_CONFIDENCE_SECTIONS):
            self._process_section(page, section, collector)

    def _other_sections(self, page: Page, collector: PeopleCollector):
        for section in page.select(OTHER_SECTIONS):
            self._process_section(page, section, collector)

    def _heading_scan(self, page: Page, collector: PeopleCollector):
        for el in page.select("h3, h4, h5"):
            if page.noise.is_inside_noise(el) or page.noise.is_inside_testimonial(el):
                continue
            name, dash_title = split_name_title(text_of(el))
            if not 2 <= len(name) <= 80:
                continue
            contact = contact_from_container(el.parent)
            next_el = el.find_next_sibling()
            description = text_of(next_el) if next_el is not None else ""
            description = description or text_of(el.parent)
            collector.add(name, dash_title, description, contact.get("email"), contact.get("phone"))

    def _headings_with_contact(self, page: Page, collector: PeopleCollector):
        """A 2-4 word heading sharing a block with a mailto/tel link is taken as a person."""
        for el in page.select("h2, h3, h4, h5, strong"):
            if page.noise.is_inside_noise(el) or page.noise.is_inside_testimonial(el):
                continue
            name, dash_title = split_name_title(text_of(el))
            if not 2 <= len(name.split()) <= 4 or len(name) > 50:
                continue
            container = closest(el, "section, article, div[class], aside") or el.parent
            contact = contact_from_container(container)
            if not contact:
                continue
            title_el = container.select_one(TITLE_SELECTOR)
            title = (text_of(title_el) if title_el is not None else None) or dash_title
            collector.add(name, title, None, contact.get("email"), contact.get("phone"))

    def _name_title_lines(self, page: Page, collector: PeopleCollector):
        for el in page.select("p, li, td"):
            if page.noise.is_noise(el) or page.noise.is_inside_testimonial(el):
                continue
            if closest(el, NARRATIVE_SECTIONS) is None:
                continue
            for line in re.split(r"\n|\.\s+", el.get_text()):
                line = clean_text(line)
                for pattern in (DASH_LINE_RE, COMMA_LINE_RE):
                    match = pattern.match(line)
                    if match and len(match.group(1)) >= 4 and SENIOR_TITLE_RE.search(match.group(2)):
                        collector.add(match.group(1), clean_text(match.group(2)))

    def _narrative(self, page: Page, collector: PeopleCollector):
        """'Founder Jane Doe' and 'Jane Doe is the founder' in about/team copy."""
        for el in page.select(NARRATIVE_SECTIONS):
            if page.noise.is_inside_testimonial(el):
                continue
            text = text_of(el)
            for match in TITLE_NAME_RE.finditer(text):
                name = clean_text(match.group(2))
                if 4 <= len(name) <= 40:
                    collector.add(name, match.group(1))
            for match in NAME_TITLE_RE.finditer(text):
                name = clean_text(match.group(1))
                if 4 <= len(name) <= 40:
                    collector.add(name, match.group(2))

    def bio_links(self, page: Page) -> List[Tuple[str, str]]:
        """(name, profile url) for team cards whose own bio is thin but which link to a profile page."""
        links = []
        for section in page.select(BIO_SECTIONS):
            if page.noise.is_noise(section):
                continue
            for card in section.select(BIO_CARD_SELECTOR):
                name_el = card.select_one("h2, h3, h4, h5, .name, [class*='name'], strong")
                if name_el is None:
                    continue
                name = text_of(name_el)
                if not 2 <= len(name) <= 80:
                    continue
                bio = bio_from_container(card, name)
                if bio and len(bio) > 100:
                    continue
                for a in card.find_all("a", href=True):
                    full = resolve_url(a["href"], page.url)
                    if not full or not is_same_origin(full, page.url):
                        continue
                    if BIO_LINK_TEXT_RE.search(text_of(a)) or BIO_LINK_HREF_RE.search(a["href"]):
                        if (name, full) not in links:
                            links.append((name, full))
                        break
        return links


people_extractor = PeopleExtractor()
