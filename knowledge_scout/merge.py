"""
Fill-only-if-empty merging of an auxiliary page's extraction into the working record.
"""
from typing import Any, Callable, Dict, List

from .assembler import PageExtraction
from .extractors.offerings import GENERAL_OFFERING, MAX_OFFERINGS, is_sparse
from .extractors.testimonials import fingerprint
from .field_validators import FieldValidators
from .models import RecordBuilder
from .utils import logger

MAX_MERGED_PEOPLE = 25

# (category, field) -> cap re-applied after union
LIST_CAPS = {
    ("market_customers", "target_buyers"): 12,
    ("market_customers", "customer_needs"): 10,
    ("market_customers", "industry_groupings"): 12,
    ("market_customers", "channels"): 8,
    ("market_customers", "funnels"): 10,
    ("market_customers", "ctas"): 15,
    ("market_customers", "suppliers_partners"): 15,
    ("branding_style", "fonts"): 8,
    ("branding_style", "colors"): 10,
    ("branding_style", "logos"): 5,
    ("online_presence", "other_social"): 10,
    ("extended", "content_themes"): 15,
    ("extended", "testimonials"): 15,
    ("extended", "certifications_awards"): 15,
    ("extended", "faq"): 20,
    ("extended", "usps"): 5,
    ("extended", "values_community"): 15,
    ("extended", "pricing_notes"): 10,
}
# Lists that describe the main page only; filled when empty, never unioned
FILL_ONLY_LISTS = {("company_foundation", "alternative_names")}


def _list_key(category: str, name: str) -> Callable[[Any], str]:
    if (category, name) == ("extended", "testimonials"):
        return fingerprint
    if (category, name) == ("extended", "faq"):
        return lambda pair: pair["question"].strip().lower()
    return lambda value: str(value).strip().lower()


def union(current: List, candidates: List, key: Callable[[Any], str], cap: int = None) -> List:
    """Current items first, then unseen candidates, trimmed to cap."""
    seen = {key(item) for item in current}
    merged = list(current)
    for item in candidates:
        k = key(item)
        if k not in seen:
            seen.add(k)
            merged.append(item)
    return merged[:cap] if cap else merged


def fill_category(category: str, current: Dict[str, Any], candidate: Dict[str, Any]) -> List[str]:
    """Assign unset scalars, union lists. Returns the names of fields that changed."""
    changed = []
    for name, value in candidate.items():
        if value in (None, "", []):
            continue
        existing = current.get(name)
        if isinstance(value, list) and (category, name) not in FILL_ONLY_LISTS:
            merged = union(existing or [], value, _list_key(category, name), LIST_CAPS.get((category, name)))
            if merged != (existing or []):
                current[name] = merged
                changed.append(name)
        elif existing in (None, "", []):
            current[name] = value
            changed.append(name)
    return changed


def merge_people(current: List[Dict[str, Any]], candidates: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """New people appended by normalized name; known people only gain fields they lack."""
    by_key = {FieldValidators.person_key(p["name"]): p for p in current}
    merged = list(current)
    for person in candidates:
        key = FieldValidators.person_key(person["name"])
        if key in by_key:
            fill_category("key_people", by_key[key], person)
            continue
        by_key[key] = dict(person)
        merged.append(by_key[key])
    return merged[:MAX_MERGED_PEOPLE]


def merge_offerings(current: List[Dict[str, Any]], detailed: List[Dict[str, Any]], service_like: bool) -> List[Dict[str, Any]]:
    """A richer offering set from a service page replaces a sparse one, keeping unmatched originals."""
    if not detailed or not service_like or not is_sparse(current):
        return current
    names = {o["name"].lower() for o in detailed}
    kept = [o for o in current if o["name"].lower() not in names and o["name"] != GENERAL_OFFERING]
    return (list(detailed) + kept)[:MAX_OFFERINGS]


def merge_page(builder: RecordBuilder, extraction: PageExtraction, service_like: bool = None) -> RecordBuilder:
    """Merge one auxiliary page into the builder without overwriting anything already set."""
    if service_like is None:
        service_like = extraction.service_like
    changed = []
    for category, values in extraction.categories.items():
        changed.extend(f"{category}.{name}" for name in fill_category(category, builder.category(category), values))

    people_before = len(builder.key_people)
    builder.key_people = merge_people(builder.key_people, extraction.key_people)
    builder.offerings = merge_offerings(builder.offerings, extraction.detailed_offerings, service_like)
    for link in extraction.bio_links:
        if link not in builder.bio_links:
            builder.bio_links.append(link)

    logger.debug(
        f"Merged {extraction.url}: {len(changed)} fields, {len(builder.key_people) - people_before} new people"
    )
    return builder
