import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .utils import load_settings


class RecordModel(BaseModel):
    """Frozen, camelCase-serialized base for every knowledge record section."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CompanyFoundation(RecordModel):
    overview: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    business_model: Optional[str] = None
    year_founded: Optional[str] = None
    legal_entity_type: Optional[str] = None
    employee_count: Optional[str] = None
    main_address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    alternative_names: List[str] = Field(default_factory=list)


class Positioning(RecordModel):
    company_pitch: Optional[str] = Field(default=None, max_length=500)
    founding_story: Optional[str] = Field(default=None, max_length=1500)


class MarketCustomers(RecordModel):
    target_buyers: List[str] = Field(default_factory=list)
    customer_needs: List[str] = Field(default_factory=list)
    ideal_persona: Optional[str] = None
    industry_groupings: List[str] = Field(default_factory=list)
    industry_outlook: Optional[str] = None
    channels: List[str] = Field(default_factory=list)
    funnels: List[str] = Field(default_factory=list)
    ctas: List[str] = Field(default_factory=list)
    suppliers_partners: List[str] = Field(default_factory=list)


class BrandingStyle(RecordModel):
    writing_style: Optional[str] = None
    art_style: Optional[str] = None
    fonts: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list, max_length=10)
    logos: List[str] = Field(default_factory=list, max_length=5)


class OnlinePresence(RecordModel):
    linked_in: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter_x: Optional[str] = None
    youtube: Optional[str] = None
    other_social: List[str] = Field(default_factory=list)


class KeyPerson(RecordModel):
    name: str = Field(min_length=2, max_length=80)
    title: Optional[str] = None
    role: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=600)
    email: Optional[str] = None
    phone: Optional[str] = None


class Offering(RecordModel):
    name: str = Field(min_length=1)
    type: Literal["product", "service", "other"] = "service"
    description: Optional[str] = Field(default=None, max_length=600)
    features: List[str] = Field(default_factory=list, max_length=10)
    pricing: Optional[str] = None
    category: Optional[str] = None


class FaqItem(RecordModel):
    question: str
    answer: str


class ExtendedKnowledge(RecordModel):
    content_themes: List[str] = Field(default_factory=list)
    testimonials: List[str] = Field(default_factory=list, max_length=15)
    certifications_awards: List[str] = Field(default_factory=list)
    faq: List[FaqItem] = Field(default_factory=list, max_length=20)
    usps: List[str] = Field(default_factory=list)
    values_community: List[str] = Field(default_factory=list)
    customer_gets: Optional[str] = None
    pricing_notes: List[str] = Field(default_factory=list)


class KnowledgeRecord(RecordModel):
    id: str
    source_url: str
    scraped_at: str
    company_foundation: CompanyFoundation = Field(default_factory=CompanyFoundation)
    positioning: Positioning = Field(default_factory=Positioning)
    market_customers: MarketCustomers = Field(default_factory=MarketCustomers)
    branding_style: BrandingStyle = Field(default_factory=BrandingStyle)
    online_presence: OnlinePresence = Field(default_factory=OnlinePresence)
    key_people: List[KeyPerson] = Field(default_factory=list, max_length=30)
    offerings: List[Offering] = Field(default_factory=list, max_length=15)
    extended: ExtendedKnowledge = Field(default_factory=ExtendedKnowledge)


class ScrapeOutcome(BaseModel):
    success: bool
    record: Optional[KnowledgeRecord] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def generate_record_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"kb_{int(time.time() * 1000)}_{suffix}"


# Category dicts the builder owns, in record order
CATEGORIES = (
    "company_foundation",
    "positioning",
    "market_customers",
    "branding_style",
    "online_presence",
    "extended",
)


class RecordBuilder:
    """
    Working state of a single scrape.

    Extraction, merging and bio resolution mutate the plain dicts/lists held here;
    build() validates them into a frozen KnowledgeRecord.
    """

    def __init__(self, source_url: str):
        self.source_url = source_url
        self.company_foundation: Dict[str, Any] = {}
        self.positioning: Dict[str, Any] = {}
        self.market_customers: Dict[str, Any] = {}
        self.branding_style: Dict[str, Any] = {}
        self.online_presence: Dict[str, Any] = {}
        self.extended: Dict[str, Any] = {}
        self.key_people: List[Dict[str, Any]] = []
        self.offerings: List[Dict[str, Any]] = []
        # (person name, profile url) pairs collected while crawling
        self.bio_links: List[Tuple[str, str]] = []

    def category(self, name: str) -> Dict[str, Any]:
        if name not in CATEGORIES:
            raise KeyError(name)
        return getattr(self, name)

    def build(self) -> KnowledgeRecord:
        return KnowledgeRecord(
            id=generate_record_id(),
            source_url=self.source_url,
            scraped_at=datetime.now(timezone.utc).isoformat(),
            company_foundation=CompanyFoundation(**self.company_foundation),
            positioning=Positioning(**self.positioning),
            market_customers=MarketCustomers(**self.market_customers),
            branding_style=BrandingStyle(**self.branding_style),
            online_presence=OnlinePresence(**self.online_presence),
            key_people=[KeyPerson(**person) for person in self.key_people],
            offerings=[Offering(**offering) for offering in self.offerings],
            extended=ExtendedKnowledge(**self.extended),
        )


class ScraperSettings(BaseModel):
    user_agent: str = "Mozilla/5.0 (compatible; KnowledgeScout/1.0)"
    main_timeout: float = 15
    page_timeout: float = 10
    browser_fallback: bool = True
    browser_timeout_ms: int = 15000
    browser_settle_ms: int = 2000
    min_text_for_static: int = 500
    min_text_for_browser: int = 300
    min_rendered_html: int = 1000
    max_bio_fetches: int = 10
    candidate_paths: List[str] = Field(default_factory=lambda: [
        "/about", "/about-us", "/contact", "/contact-us", "/services",
        "/our-team", "/team", "/leadership", "/staff", "/meet-the-team",
    ])
    legal_boilerplate_phrases: List[str] = Field(default_factory=lambda: [
        "legal@", "Terms of Service", "Privacy Policy", "Copyright Agent",
    ])

    @classmethod
    def from_settings(cls, overrides: Optional[Dict[str, Any]] = None) -> "ScraperSettings":
        data = dict(load_settings())
        data.update(overrides or {})
        return cls.model_validate(data)
