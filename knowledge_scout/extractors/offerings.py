"""
Offerings (products/services) with descriptions, features and pricing.
"""
import re
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from ..content_cleaner import clean_text
from ..page import Page, closest, next_until, text_of
from .base import first_result, unique

MAX_OFFERINGS = 15
MAX_FEATURES = 10
DESCRIPTION_LIMIT = 600

SKIP_NAME_RE = re.compile(
    r"^(?:home|about|contact|login|menu)$|testimonial|what (?:our )?clients (?:are )?saying|newsletter"
    r"|why (?:choose )?us|why (?:we|us)\b|get in touch|follow us|sign up|subscribe|our (?:team|story|mission)"
    r"|contact us|request a quote|schedule (?:a )?(?:call|consultation)|faq|frequently asked|track your refund|directory",
    re.I,
)
SECTION_SELECTORS = [
    '[class*="service"]', '[class*="product"]', '[class*="pricing"]', '[class*="offer"]',
    '[class*="featured"]', '[class*="listing"]', '[class*="solution"]', '[class*="package"]',
    '[class*="plan"]', '[class*="card"]', '[class*="insurance"]', '[class*="coverage"]',
    '[id*="service"]', '[id*="product"]', '[id*="offer"]', "article", "section",
]
NAME_SELECTOR = "h2, h3, h4, h5, .title, [class*='title'], [class*='name'], [class*='heading']"
CONTAINER_SELECTOR = (
    "article, [class*='card'], [class*='item'], [class*='service'], [class*='product'], [class*='offer'], "
    "[class*='plan'], section, div"
)
FEATURE_SELECTOR = "li, [class*='feature'], [class*='benefit'], [class*='include'], [class*='detail']"
HEADINGS = ["h1", "h2", "h3", "h4", "h5"]

FEATURES_LABEL_RE = re.compile(r"Features:\s*(.+?)(?:\n|Pricing:|$)", re.I)
INCLUDES_RE = re.compile(r"(?:features?|includes?|specs?|details?):\s*([^.\n]+(?:,\s*[^.\n]+)+)", re.I)
PRICING_LABEL_RE = re.compile(r"Pricing:\s*([^\n]+)", re.I)
PRICE_RE = re.compile(
    r"\$[\d,]+(?:\.\d{2})?(?:\s*/\s*(?:mo|month|yr|year|per|each))?|\d+(?:\.\d{2})?\s*(?:USD|EUR|GBP|dollars?)"
    r"|(?:Fixed Price|Commission-based|Price):\s*[\d,]+|Personalized Quote|Free Estimate|Per Project"
    r"|Per (?:Inspection|Service Call)|Contact (?:us|for quote)",
    re.I,
)
PRICE_NOTE_RE = re.compile(r"\$[\d,]+(?:\.\d{2})?(?:\s*/\s*(?:mo|month|yr|year))?|\d+(?:\.\d{2})?\s*(?:USD|EUR|GBP)", re.I)
NOT_SERVICE_RE = re.compile(
    r"testimonial|what (?:our )?clients|newsletter|why (?:choose )?us|why (?:we|us)\b|join our|get in touch"
    r"|follow us|sign up|subscribe|our (?:team|story|mission)|contact us|request a quote"
    r"|schedule (?:a )?(?:call|consultation)|faq|frequently asked",
    re.I,
)
NAV_NAME_RE = re.compile(r"^(?:home|about|contact|services|our team|login|sign|menu)$", re.I)
HEADING_SKIP_RE = re.compile(
    r"^(?:home|about|contact|services|our team|menu|login|sign|faq|blog|news|testimonial|why (?:choose )?us"
    r"|get in touch|follow us)$",
    re.I,
)
TITLE_OFFERINGS = [
    (re.compile(r"tax|accounting|cpa", re.I), ["Tax preparation and filing", "Tax planning and consulting", "Accounting services"]),
    (re.compile(r"consulting", re.I), ["Consulting services", "Advisory"]),
    (re.compile(r"legal|law|attorney", re.I), ["Legal services", "Legal advice"]),
    (re.compile(r"insurance", re.I), ["Insurance products and advice"]),
]
INSURANCE_LINES = [
    "Life Insurance", "Auto Insurance", "Home Insurance", "Business Insurance",
    "Flood Insurance", "Rental Insurance", "Umbrella Insurance",
]
GENERAL_OFFERING = "General offerings"


def offering(name: str, description: str = None, features: List[str] = None, pricing: str = None,
             kind: str = "service") -> Dict:
    item = {"name": name, "type": kind}
    if description:
        item["description"] = description[:DESCRIPTION_LIMIT]
    if features:
        item["features"] = features[:MAX_FEATURES]
    if pricing:
        item["pricing"] = pricing
    return item


def add_unique(offerings: List[Dict], candidates: List[Dict]) -> List[Dict]:
    """Append candidates whose names are new (case-insensitive)."""
    names = {o["name"].lower() for o in offerings}
    for candidate in candidates:
        if candidate["name"].lower() not in names:
            names.add(candidate["name"].lower())
            offerings.append(candidate)
    return offerings


def is_sparse(offerings: List[Dict]) -> bool:
    """True when no offering carries a description or features (or only the placeholder exists)."""
    if not offerings or offerings[0]["name"] == GENERAL_OFFERING:
        return True
    return not any(o.get("description") or o.get("features") for o in offerings)


class OfferingsExtractor:

    def extract(self, page: Page) -> Tuple[List[Dict], Optional[str]]:
        """Offerings for the page plus the customer-gets summary."""
        offerings = self.detailed(page)
        prices = self.price_notes(page)
        if not offerings and prices:
            offerings = [offering(f"Plan {i + 1}", pricing=price) for i, price in enumerate(prices)]
        customer_offerings, customer_gets = self.customer_offerings(page)
        from_title = [o for o in customer_offerings if o["name"].lower() not in {x["name"].lower() for x in offerings}]
        if not offerings and not from_title:
            offerings = self.heading_fallback(page)
        return add_unique(offerings, from_title)[:MAX_OFFERINGS], customer_gets

    # --- detailed section scan ---

    def detailed(self, page: Page) -> List[Dict]:
        offerings: List[Dict] = []
        seen = set()
        for selector in SECTION_SELECTORS:
            for section in page.select(selector):
                if page.noise.is_noise(section):
                    continue
                for el in section.select(NAME_SELECTOR):
                    name = text_of(el)
                    if not 3 <= len(name) <= 150 or SKIP_NAME_RE.search(name) or name.lower() in seen:
                        continue
                    if page.noise.is_inside_noise(el) or page.noise.is_inside_testimonial(el):
                        continue
                    container = closest(el.parent, CONTAINER_SELECTOR) if isinstance(el.parent, Tag) else None
                    container = container or el.parent
                    item = self._build(el, name, container)
                    if item:
                        seen.add(name.lower())
                        offerings.append(item)
        return offerings

    def _build(self, heading: Tag, name: str, container: Tag) -> Optional[Dict]:
        block_text = container.get_text("\n")
        description = first_result(
            [
                self._desc_from_features_block,
                self._desc_after_heading,
                self._desc_from_paragraph,
                self._desc_from_attributes,
                self._desc_from_container_text,
            ],
            heading, name, container,
            validate=lambda d: d if len(d) >= 30 else None,
        ) or ""
        description = self._strip_labels(description)
        features = self.features(container, block_text)
        if len(description) < 50 and features:
            for p in container.find_all("p"):
                text = text_of(p)
                if len(text) > 50 and "features:" not in text.lower() and "pricing:" not in text.lower():
                    description = text[:DESCRIPTION_LIMIT]
                    break
        if len(description) <= 25 and not features:
            return None
        return offering(name, description if len(description) > 25 else None, features, self.pricing(block_text))

    def _desc_from_features_block(self, heading: Tag, name: str, container: Tag) -> Optional[str]:
        text = container.get_text("\n")
        idx = text.lower().find("features:")
        if idx < 0:
            return None
        after = text[idx:]
        pricing_idx = after.lower().find("pricing:")
        if pricing_idx > -1:
            after = after[:pricing_idx]
        paragraphs = [clean_text(p) for p in re.split(r"\n+", after)]
        paragraphs = [p for p in paragraphs if len(p) > 50]
        return max(paragraphs, key=len)[:DESCRIPTION_LIMIT] if paragraphs else None

    def _desc_after_heading(self, heading: Tag, name: str, container: Tag) -> Optional[str]:
        text = clean_text(" ".join(text_of(el) for el in next_until(heading, HEADINGS)))
        return text[:DESCRIPTION_LIMIT] if len(text) > 30 else None

    def _desc_from_paragraph(self, heading: Tag, name: str, container: Tag) -> Optional[str]:
        for p in container.find_all("p"):
            text = text_of(p)
            lower = text.lower()
            if len(text) > 50 and "features:" not in lower and "pricing:" not in lower \
                    and not re.match(r"^\d+\s*(?:bed|bath|sqft|car)", lower):
                return text[:500]
        return None

    def _desc_from_attributes(self, heading: Tag, name: str, container: Tag) -> Optional[str]:
        value = container.get("data-description") or container.get("aria-label") or heading.get("data-description")
        value = clean_text(value)
        return value[:500] if len(value) > 30 else None

    def _desc_from_container_text(self, heading: Tag, name: str, container: Tag) -> Optional[str]:
        text = clean_text(text_of(container).replace(name, "", 1))
        return text[:500] if len(text) > 30 else None

    @staticmethod
    def _strip_labels(description: str) -> str:
        description = re.sub(r"Features:\s*[^\n]+", "", description, flags=re.I)
        description = re.sub(r"Pricing:\s*[^\n]+", "", description, flags=re.I)
        sentences = [s for s in re.split(r"[.!?]\s+", clean_text(description)) if len(s) > 15]
        return ". ".join(sentences)[:DESCRIPTION_LIMIT]

    def features(self, container: Tag, block_text: str) -> List[str]:
        features = []
        match = FEATURES_LABEL_RE.search(block_text)
        if match:
            features.extend(f for f in (clean_text(x) for x in match.group(1).split(",")) if 3 < len(f) < 200)
        for el in container.select(FEATURE_SELECTOR):
            text = text_of(el)
            if 5 < len(text) < 200 and not SKIP_NAME_RE.search(text):
                features.append(text)
        if not features:
            match = INCLUDES_RE.search(block_text)
            if match:
                features.extend(f for f in (clean_text(x) for x in match.group(1).split(",")) if 3 < len(f) < 200)
        return unique(features, MAX_FEATURES)

    def pricing(self, block_text: str) -> Optional[str]:
        match = PRICING_LABEL_RE.search(block_text)
        if match:
            return clean_text(match.group(1))[:100] or None
        match = PRICE_RE.search(block_text)
        return clean_text(match.group(0)) if match else None

    # --- other sources ---

    def price_notes(self, page: Page) -> List[str]:
        prices = []
        for el in page.select("[class*='pricing'], [class*='price'], [class*='plan']"):
            prices.extend(PRICE_NOTE_RE.findall(el.get_text(" ")))
        return unique(prices, 10, key=lambda v: v)

    def customer_offerings(self, page: Page) -> Tuple[List[Dict], Optional[str]]:
        """Offerings implied by the title, service-section headings and top headings."""
        names = []
        main_lower = page.main_text[:5000].lower()
        for pattern, labels in TITLE_OFFERINGS:
            if pattern.search(page.title):
                if labels[0] == "Insurance products and advice":
                    names.extend(line for line in INSURANCE_LINES if line.lower() in main_lower)
                names.extend(labels)
        for section in page.select("[class*='service'], [class*='offer'], [class*='what-we'], [class*='what-you'], [class*='solutions']"):
            if page.noise.is_noise(section):
                continue
            for el in section.select("h2, h3, h4, h5, li, [class*='item']"):
                text = text_of(el)
                if 3 <= len(text) <= 120 and not NAV_NAME_RE.match(text) and not NOT_SERVICE_RE.search(text):
                    names.append(text)
        for el in page.select("h1, h2"):
            text = text_of(el)
            if 5 < len(text) < 150 and not NAV_NAME_RE.match(text) and not NOT_SERVICE_RE.search(text):
                names.append(text)
        names = unique(names, MAX_OFFERINGS)
        customer_gets = "; ".join(names[:8]) if names else None
        return [offering(name) for name in names], customer_gets

    def heading_fallback(self, page: Page) -> List[Dict]:
        """Every h2/h3 as an offering when nothing service-like was found."""
        offerings = []
        for el in page.visible("h2, h3"):
            name = text_of(el)
            if not 3 <= len(name) <= 100 or HEADING_SKIP_RE.match(name):
                continue
            description = clean_text(" ".join(text_of(x) for x in next_until(el, ["h1", "h2", "h3", "h4"])))[:500]
            if len(description) < 30:
                first_p = el.parent.find("p") if isinstance(el.parent, Tag) else None
                if first_p is not None and len(text_of(first_p)) > 30:
                    description = text_of(first_p)[:500]
            add_unique(offerings, [offering(name, description if len(description) > 25 else None)])
        return offerings


offerings_extractor = OfferingsExtractor()
