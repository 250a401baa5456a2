"""
Market & customers: who the business sells to, what they need and how they reach it.
"""
import re
from typing import List, Optional

from ..content_cleaner import clean_text, is_legal_boilerplate
from ..page import Page, text_of
from .base import first_result, unique

NAV_TEXT_RE = re.compile(r"^(?:home|about|contact|menu)$", re.I)

AUDIENCE_SELECTOR = (
    "[class*='audience'], [class*='who-we'], [class*='clients'], [class*='customers'], "
    "[class*='serve'], [class*='target']"
)
PERSONA_SELECTOR = (
    "[class*='persona'], [class*='audience'], [class*='who-we'], [class*='our-clients'], [class*='ideal'], "
    "[class*='target-audience'], [class*='market'], [class*='customers']"
)
NEEDS_SELECTOR = (
    "[class*='need'], [class*='why-choose'], [class*='problem'], [class*='solution'], "
    "[class*='benefit'], [class*='customer']"
)
PARTNER_SELECTOR = "[class*='partner'], [class*='supplier'], [class*='integration']"
OUTLOOK_SELECTOR = "[class*='industry'], [class*='market'], [class*='outlook'], [class*='trends'], [class*='sector']"

AUDIENCE_PHRASES = [
    (re.compile(r"\b(?:we serve|serving|for)\s+(?:both\s+)?(?:residential and commercial|homeowners and (?:commercial|business))", re.I),
     "Residential and commercial clients"),
    (re.compile(r"\bhomeowners?\b", re.I), "Homeowners"),
    (re.compile(r"\b(?:small\s+)?business(?:es)?\b", re.I), "Small businesses"),
    (re.compile(r"\bcontractors?\b", re.I), "Contractors"),
    (re.compile(r"\benterprises?\b|\bB2B\b", re.I), "Enterprises / B2B"),
    (re.compile(r"\b(?:individuals?|families?|consumers?|B2C)\b", re.I), "Individuals"),
    (re.compile(r"\bfamilies\b", re.I), "Families"),
    (re.compile(r"\bproperty\s+owners?\b", re.I), "Property owners"),
    (re.compile(r"\bvehicle\s+owners?\b|\bcar\s+owners?\b", re.I), "Vehicle owners"),
    (re.compile(r"\brental\s+property\s+owners?\b", re.I), "Rental property owners"),
    (re.compile(r"\bspanish[- ]?speaking\s+community\b", re.I), "Spanish-speaking community"),
    (re.compile(r"\b(?:local|regional)\s+communities?\b", re.I), "Local communities"),
    (re.compile(r"\bgovernment\s+(?:agencies?|contracts?)\b", re.I), "Government"),
    (re.compile(r"\bnonprofits?\b", re.I), "Nonprofits"),
    (re.compile(r"\bagricultural\s+clients?\b|\bagriculture\b", re.I), "Agricultural clients"),
    (re.compile(r"\bpublic\s*/\s*community\s+entities?\b", re.I), "Public/Community entities"),
]
HOME_TRADES_RE = re.compile(r"plumb|drill|well|water|repair|hvac|roof|landscap|lawn|clean|moving|handyman", re.I)
PROFESSIONAL_RE = re.compile(r"consulting|accounting|legal|marketing|software|agency|tax|cpa", re.I)

IDEAL_CUSTOMER_RE = re.compile(
    r"(?:ideal\s+(?:customer|client|persona)|who\s+we\s+serve|our\s+clients?\s+include)[^.]{20,400}\.", re.I
)
NEED_WORDS_RE = re.compile(
    r"need|want|seek|require|looking for|protect|ensure|help|assist|peace of mind|confidence|support"
    r"|guidance|coverage|protection",
    re.I,
)
NEED_PHRASE_RE = re.compile(r"(?:customers?|clients?|you)\s+(?:need|want|seek|require|look for)[^.!?]{10,150}[.!?]", re.I)
PROBLEM_PHRASE_RE = re.compile(r"(?:struggl|challeng|problem|difficult|complex|overwhelm)[^.!?]{5,120}[.!?]", re.I)

CHANNEL_SIGNALS = [
    (re.compile(r"contact us|get in touch|reach us|call us|phone|tel:", re.I), "Phone"),
    (re.compile(r"email|@|contact form|message us", re.I), "Online"),
    (re.compile(r"visit|location|address|in[- ]?person|office|walk[- ]?in", re.I), "In-person"),
    (re.compile(r"chat|live chat|messenger", re.I), "Chat"),
    (re.compile(r"social|facebook|linkedin|twitter|instagram", re.I), "Social media"),
]
FUNNEL_PHRASES = [
    re.compile(r"quote\s*form|get\s*a\s*quote|request\s*quote", re.I),
    re.compile(r"contact\s*form|contact\s*us|get\s*in\s*touch", re.I),
    re.compile(r"sign\s*up|newsletter|subscribe", re.I),
    re.compile(r"schedule|appointment|book\s*a\s*call|consultation", re.I),
    re.compile(r"request\s*(?:a\s*)?(?:demo|estimate|assessment)", re.I),
    re.compile(r"apply\s*now|application", re.I),
    re.compile(r"callback|request\s*call", re.I),
]
PARTNER_RE = re.compile(r"(?:partner|powered by|integrat(?:ion|es)|via|using)\s+(?:with\s+)?([A-Z][A-Za-z0-9.\s]+?)(?:\s+(?:and|,)|\.|$)")
INDUSTRY_WORDS = [
    "medical", "healthcare", "law", "legal", "construction", "real estate", "insurance", "tax", "accounting",
    "restaurant", "retail", "manufacturing", "technology", "finance", "education", "government", "nonprofit",
    "contractors", "trades", "homeowners", "businesses", "individuals", "families",
]


class MarketExtractor:
    """Heuristics for the market & customers category."""

    def extract(self, page: Page, industry: Optional[str] = None, business_model: Optional[str] = None) -> dict:
        buyers = self.target_buyers(page)
        return {
            "target_buyers": buyers,
            "customer_needs": self.customer_needs(page),
            "ideal_persona": self.ideal_persona(page, buyers),
            "industry_groupings": self.industry_groupings(page, industry),
            "industry_outlook": self.industry_outlook(page, industry, business_model),
            "channels": self.channels(page),
            "funnels": self.funnels(page),
            "suppliers_partners": self.suppliers_partners(page),
        }

    def target_buyers(self, page: Page) -> List[str]:
        main_text = page.main_text[:6000]
        buyers = []
        for section in page.select(AUDIENCE_SELECTOR):
            if page.noise.is_inside_noise(section):
                continue
            for node in section.select("li, p, h3, h4, [class*='item']"):
                text = text_of(node)
                if 2 <= len(text) <= 80 and not NAV_TEXT_RE.match(text):
                    buyers.append(text)
        buyers.extend(label for pattern, label in AUDIENCE_PHRASES if pattern.search(main_text))
        if not buyers:
            combined = f"{page.title} {main_text[:1000]}"
            buyers.extend(label for pattern, label in AUDIENCE_PHRASES if pattern.search(combined))
            if not buyers and page.title:
                if HOME_TRADES_RE.search(page.title):
                    buyers.append("Homeowners")
                if PROFESSIONAL_RE.search(page.title):
                    buyers.append("Small businesses")
        return unique((b for b in buyers if 1 < len(b) < 80), 12)

    def ideal_persona(self, page: Page, buyers: List[str] = None) -> Optional[str]:
        if buyers is None:
            buyers = self.target_buyers(page)
        return first_result(
            [self._persona_from_sections, self._persona_from_paragraphs, self._persona_from_phrase],
            page,
        ) or self._persona_from_buyers(buyers)

    def _persona_from_sections(self, page: Page) -> Optional[str]:
        for section in page.select(PERSONA_SELECTOR):
            if page.noise.is_inside_noise(section):
                continue
            text = text_of(section)
            if 80 <= len(text) <= 1200 and not is_legal_boilerplate(text):
                return text[:700]
        return None

    def _persona_from_paragraphs(self, page: Page) -> Optional[str]:
        for section in page.select("[class*='serve'], [class*='clients'], [class*='customers']"):
            if page.noise.is_inside_noise(section):
                continue
            paragraphs = [t for t in (text_of(p) for p in section.find_all("p")) if 50 <= len(t) <= 500]
            if paragraphs:
                return " ".join(paragraphs[:2])[:600]
        return None

    def _persona_from_phrase(self, page: Page) -> Optional[str]:
        match = IDEAL_CUSTOMER_RE.search(page.main_text)
        return clean_text(match.group(0))[:600] if match else None

    @staticmethod
    def _persona_from_buyers(buyers: List[str]) -> Optional[str]:
        if not buyers:
            return None
        return (
            f"Target audience includes {', '.join(buyers[:8])}. Clients seek the services and expertise offered, "
            "with personalized support and clear guidance."
        )

    def customer_needs(self, page: Page) -> List[str]:
        needs: List[str] = []

        def add(value: str):
            value = clean_text(value)[:200]
            if len(value) >= 15 and not any(value[:30].lower() in n.lower() for n in needs):
                needs.append(value)

        for section in page.select(NEEDS_SELECTOR):
            if page.noise.is_inside_noise(section):
                continue
            for node in section.select("li, p"):
                text = text_of(node)
                if 20 <= len(text) <= 300 and NEED_WORDS_RE.search(text):
                    add(text)
        main_text = page.main_text[:8000]
        for match in NEED_PHRASE_RE.findall(main_text)[:5]:
            add(match)
        for match in PROBLEM_PHRASE_RE.findall(main_text)[:3]:
            add(match)
        return needs[:10]

    def channels(self, page: Page) -> List[str]:
        main_text = page.main_text
        channels = [label for pattern, label in CHANNEL_SIGNALS if pattern.search(main_text)]
        for el in page.select("[class*='contact'], [class*='channel']"):
            text = text_of(el).lower()
            if "online" in text:
                channels.append("Online")
            if "phone" in text:
                channels.append("Phone")
        return unique(channels, 8)

    def funnels(self, page: Page) -> List[str]:
        funnels = []
        for form in page.select("form"):
            submit = form.select_one("[type=submit], button")
            placeholder = form.select_one("[placeholder]")
            label = clean_text(
                (text_of(submit) if submit else "")
                or (placeholder.get("placeholder") if placeholder else "")
                or form.get("action")
            )
            if len(label) >= 2:
                funnels.append(label)
        main_text = page.main_text
        for pattern in FUNNEL_PHRASES:
            match = pattern.search(main_text)
            if match:
                funnels.append(match.group(0))
        return unique((f for f in funnels if 3 <= len(clean_text(f)) <= 80), 10)

    def suppliers_partners(self, page: Page) -> List[str]:
        partners = []
        for section in page.select(PARTNER_SELECTOR):
            for node in section.select("a[href], img[alt], span, div"):
                text = text_of(node) or clean_text(node.get("alt"))
                if 2 <= len(text) <= 60 and not NAV_TEXT_RE.match(text):
                    partners.append(text)
        partners = unique(partners)
        for match in PARTNER_RE.finditer(page.main_text):
            name = clean_text(match.group(1))[:50]
            if len(name) >= 2 and not any(name.lower() in p.lower() for p in partners):
                partners.append(name)
        return partners[:15]

    def industry_groupings(self, page: Page, industry: Optional[str] = None) -> List[str]:
        main_lower = page.main_text.lower()
        groups: List[str] = []
        for word in INDUSTRY_WORDS:
            if word in main_lower and not any(word in g.lower() for g in groups):
                groups.append(word[0].upper() + word[1:])
        if industry:
            groups.insert(0, industry)
        return unique(groups, 12)

    def industry_outlook(self, page: Page, industry: Optional[str] = None,
                         business_model: Optional[str] = None) -> Optional[str]:
        for section in page.select(OUTLOOK_SELECTOR):
            if page.noise.is_inside_noise(section):
                continue
            text = text_of(section)
            if 80 <= len(text) <= 1500 and not is_legal_boilerplate(text):
                return text[:500]
        if industry and business_model:
            return f"Serves the {industry} sector with a {business_model} focus."
        if industry:
            return f"Serves the {industry} sector."
        if business_model:
            return f"Business model: {business_model}."
        return None


market_extractor = MarketExtractor()
