"""
Per-page assembly: runs the full extractor set on one Page and shapes the
results into the record's category dicts.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .classifiers import infer_business_model, infer_industry
from .extractors.about import about_extractor
from .extractors.branding import branding_extractor
from .extractors.contact import ContactExtractor
from .extractors.extended import MAX_USPS, extended_extractor
from .extractors.founding import founding_extractor
from .extractors.market import market_extractor
from .extractors.offerings import GENERAL_OFFERING, offerings_extractor
from .extractors.people import people_extractor
from .extractors.social import social_extractor
from .extractors.structured_data import structured_data_parser
from .extractors.testimonials import testimonial_extractor
from .models import RecordBuilder, ScraperSettings
from .page import Page
from .utils import logger

MAIN_PAGE_PEOPLE = 20
SERVICE_URL_RE = re.compile(r"/services|/offerings", re.I)


@dataclass
class PageExtraction:
    """Everything one page contributed, before merging."""
    url: str
    categories: Dict[str, Dict[str, Any]]
    key_people: List[Dict[str, Any]] = field(default_factory=list)
    offerings: List[Dict[str, Any]] = field(default_factory=list)
    detailed_offerings: List[Dict[str, Any]] = field(default_factory=list)
    bio_links: List[Tuple[str, str]] = field(default_factory=list)
    service_like: bool = False


def _compact(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None and empty values so unset fields stay unset."""
    return {k: v for k, v in values.items() if v not in (None, "", [], {})}


def is_service_like(page: Page) -> bool:
    return bool(SERVICE_URL_RE.search(page.url)) or len(page.select("[class*='service'], [class*='offer']")) > 2


class PageExtractor:

    def __init__(self, settings: Optional[ScraperSettings] = None):
        self.settings = settings or ScraperSettings.from_settings()
        self.contact = ContactExtractor(self.settings.legal_boilerplate_phrases)

    def extract(self, page: Page) -> PageExtraction:
        org = structured_data_parser.organization(page.json_ld)
        contact = self.contact.extract(page)
        founding = founding_extractor.extract(page)
        about = about_extractor.extract(page)

        title = page.title or page.meta("og:title") or org.get("name", "")
        description = page.meta("description") or page.meta("og:description") or org.get("description", "")
        paragraphs = extended_extractor.paragraphs(page)
        industry = infer_industry(title, page.main_text)
        business_model = infer_business_model(page.main_text)

        address = org.get("address") or contact.get("main_address")
        year_founded = org.get("year_founded") or founding.get("year_founded")
        location = address.split(",")[0].strip() if address else None
        overview = (
            about_extractor.comprehensive_overview(page, title, description, industry, location, year_founded)
            or description
            or about.get("overview")
            or (paragraphs[0] if paragraphs else None)
            or (page.main_text[:600] if len(page.main_text) > 80 else None)
            or (f"{title}." if title else None)
        )

        names = [title] if title else []
        if org.get("name") and org["name"] not in names:
            names.append(org["name"])
        if not names:
            names.append(urlparse(page.url).netloc)

        company_foundation = {
            "overview": overview,
            "website": org.get("url") or page.origin,
            "industry": industry,
            "business_model": business_model,
            "year_founded": year_founded,
            "legal_entity_type": founding.get("legal_entity_type"),
            "employee_count": org.get("employee_count") or founding.get("employee_count"),
            "main_address": address,
            "phone": contact.get("phone") or org.get("phone"),
            "email": contact.get("email") or org.get("email"),
            "alternative_names": names,
        }

        pitch = about_extractor.extract_pitch(page, description or " ".join(paragraphs[:2]))
        positioning = {
            "company_pitch": (pitch or description or (paragraphs[0] if paragraphs else None)
                              or (overview[:400] if overview else None)),
            "founding_story": about.get("founding_story"),
        }
        if positioning["company_pitch"]:
            positioning["company_pitch"] = positioning["company_pitch"][:500]

        ctas = extended_extractor.ctas(page)
        market = market_extractor.extract(page, industry, business_model)
        market["ctas"] = ctas

        faq = extended_extractor.faq(page)
        testimonials = testimonial_extractor.extract(page)
        branding = branding_extractor.extract(
            page, logo=org.get("logo"), ctas=ctas, has_faq=bool(faq), has_testimonials=bool(testimonials)
        )
        presence = social_extractor.extract(page, same_as=org.get("same_as"))

        offerings, customer_gets = offerings_extractor.extract(page)
        extended = {
            "content_themes": extended_extractor.content_themes(page),
            "testimonials": testimonials,
            "certifications_awards": extended_extractor.certifications(page),
            "faq": faq,
            "usps": ctas[:MAX_USPS],
            "values_community": extended_extractor.values(page),
            "customer_gets": customer_gets,
            "pricing_notes": offerings_extractor.price_notes(page),
        }

        service_like = is_service_like(page)
        extraction = PageExtraction(
            url=page.url,
            categories={
                "company_foundation": _compact(company_foundation),
                "positioning": _compact(positioning),
                "market_customers": _compact(market),
                "branding_style": _compact(branding),
                "online_presence": _compact(presence),
                "extended": _compact(extended),
            },
            key_people=people_extractor.extract(page),
            offerings=offerings,
            detailed_offerings=offerings_extractor.detailed(page) if service_like else [],
            bio_links=people_extractor.bio_links(page),
            service_like=service_like,
        )
        logger.debug(
            f"Extracted {page.url}: {len(extraction.key_people)} people, {len(offerings)} offerings, "
            f"{len(testimonials)} testimonials"
        )
        return extraction


def start_record(extraction: PageExtraction) -> RecordBuilder:
    """Seed a builder from the main page's extraction."""
    builder = RecordBuilder(extraction.url)
    for name, values in extraction.categories.items():
        builder.category(name).update(values)
    builder.key_people = [dict(person) for person in extraction.key_people[:MAIN_PAGE_PEOPLE]]
    builder.offerings = [dict(offering) for offering in extraction.offerings]
    builder.bio_links = list(extraction.bio_links)
    return builder


def finalize(builder: RecordBuilder) -> RecordBuilder:
    """Placeholder offering and customer-gets summary once all pages are merged."""
    if not builder.offerings:
        builder.offerings = [{"name": GENERAL_OFFERING, "type": "service"}]
    if not builder.extended.get("customer_gets"):
        builder.extended["customer_gets"] = "; ".join(o["name"] for o in builder.offerings[:8])
    return builder
