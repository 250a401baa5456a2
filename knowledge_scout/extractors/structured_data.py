"""
Structured data (schema.org JSON-LD) parsing.
"""
import json
import re
from typing import Any, Dict, List, Optional

import extruct
from bs4 import BeautifulSoup

from ..content_cleaner import clean_text
from ..field_validators import FieldValidators
from ..utils import logger

ORG_TYPE_RE = re.compile(r"Organization|LocalBusiness|Corporation|Company", re.I)
REVIEW_TYPE_RE = re.compile(r"Review|Testimonial", re.I)


def item_type(item: Dict[str, Any]) -> str:
    value = item.get("@type", "")
    if isinstance(value, list):
        value = value[0] if value else ""
    return str(value)


def _flatten(data: Any) -> List[Dict[str, Any]]:
    """Top-level objects, @graph members and array members, in document order."""
    items = []
    if isinstance(data, list):
        for entry in data:
            items.extend(_flatten(entry))
    elif isinstance(data, dict):
        graph = data.get("@graph")
        if isinstance(graph, list):
            items.extend(entry for entry in graph if isinstance(entry, dict))
        else:
            items.append(data)
    return items


class StructuredDataParser:

    def json_ld_items(self, html: str, base_url: str) -> List[Dict[str, Any]]:
        """All JSON-LD objects on the page; malformed blocks are skipped."""
        if not html or "application/ld+json" not in html:
            return []
        try:
            data = extruct.extract(html, base_url=base_url, syntaxes=["json-ld"], uniform=False)
            return _flatten(data.get("json-ld", []))
        except Exception as e:
            # One broken block makes extruct give up on the whole page; parse block by block instead
            logger.debug(f"extruct JSON-LD extraction failed for {base_url}: {e}")
        return self._json_ld_by_script(html)

    def _json_ld_by_script(self, html: str) -> List[Dict[str, Any]]:
        soup = BeautifulSoup(html, "lxml")
        items = []
        for script in soup.find_all("script", type="application/ld+json"):
            try:
                items.extend(_flatten(json.loads(script.string or "")))
            except ValueError as e:
                logger.debug(f"Skipping malformed JSON-LD block: {e}")
        return items

    def organization(self, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Organization facts, first value per field across all organization-typed items."""
        result: Dict[str, Any] = {}
        for item in items:
            if not ORG_TYPE_RE.search(item_type(item)):
                continue
            if "name" not in result and item.get("name"):
                result["name"] = clean_text(str(item["name"]))
            if "description" not in result and item.get("description"):
                result["description"] = clean_text(str(item["description"]))
            if "url" not in result and item.get("url"):
                result["url"] = str(item["url"])
            if "logo" not in result and item.get("logo"):
                logo = self._logo_url(item["logo"])
                if logo:
                    result["logo"] = logo
            if "year_founded" not in result and item.get("foundingDate"):
                year = FieldValidators.validate_year(item["foundingDate"])
                if year:
                    result["year_founded"] = year
            if "employee_count" not in result and item.get("numberOfEmployees"):
                employees = item["numberOfEmployees"]
                if isinstance(employees, dict):
                    employees = employees.get("value") or employees.get("minValue")
                if employees:
                    result["employee_count"] = str(employees)
            if "address" not in result and item.get("address"):
                address = FieldValidators.validate_address(self._format_address(item["address"]))
                if address:
                    result["address"] = address
            if "same_as" not in result and item.get("sameAs"):
                same_as = item["sameAs"]
                if isinstance(same_as, str):
                    same_as = [same_as]
                result["same_as"] = [str(url) for url in same_as][:15]
            contact = item.get("contactPoint")
            if isinstance(contact, list):
                contact = contact[0] if contact else None
            if isinstance(contact, dict):
                if "email" not in result and contact.get("email"):
                    result["email"] = str(contact["email"]).replace("mailto:", "")
                if "phone" not in result and contact.get("telephone"):
                    result["phone"] = FieldValidators.normalize_phone(str(contact["telephone"]))
            if "email" not in result and item.get("email"):
                result["email"] = str(item["email"]).replace("mailto:", "")
            if "phone" not in result and item.get("telephone"):
                result["phone"] = FieldValidators.normalize_phone(str(item["telephone"]))
        return result

    def reviews(self, items: List[Dict[str, Any]]) -> List[str]:
        """Review/Testimonial bodies, prefixed with the author name when present."""
        quotes = []
        for item in items:
            candidates = [item]
            if isinstance(item.get("review"), list):
                candidates.extend(r for r in item["review"] if isinstance(r, dict))
            elif isinstance(item.get("review"), dict):
                candidates.append(item["review"])
            for candidate in candidates:
                if not REVIEW_TYPE_RE.search(item_type(candidate)):
                    continue
                body = candidate.get("reviewBody") or candidate.get("description") or candidate.get("text")
                if not isinstance(body, str):
                    continue
                author = candidate.get("author")
                if isinstance(author, dict):
                    author = author.get("name")
                quotes.append(f"{author}: {body}" if isinstance(author, str) and author else body)
        return quotes

    def faq(self, items: List[Dict[str, Any]]) -> List[Dict[str, str]]:
        """Question/answer pairs from FAQPage mainEntity."""
        pairs = []
        for item in items:
            if item_type(item) != "FAQPage":
                continue
            entities = item.get("mainEntity") or []
            if isinstance(entities, dict):
                entities = [entities]
            for entity in entities:
                if not isinstance(entity, dict):
                    continue
                answer = entity.get("acceptedAnswer") or {}
                if isinstance(answer, list):
                    answer = answer[0] if answer else {}
                question = clean_text(str(entity.get("name") or ""))
                text = clean_text(BeautifulSoup(str(answer.get("text") or ""), "lxml").get_text(" ")) \
                    if isinstance(answer, dict) else ""
                if question and text:
                    pairs.append({"question": question, "answer": text})
        return pairs

    @staticmethod
    def _logo_url(logo: Any) -> Optional[str]:
        if isinstance(logo, str):
            return logo
        if isinstance(logo, dict) and logo.get("url"):
            return str(logo["url"])
        return None

    @staticmethod
    def _format_address(address: Any) -> str:
        """'street, city, ST 12345' from a PostalAddress object."""
        if isinstance(address, list):
            address = address[0] if address else ""
        if isinstance(address, str):
            return address
        if not isinstance(address, dict):
            return ""
        region_zip = " ".join(str(address[k]) for k in ("addressRegion", "postalCode") if address.get(k))
        parts = [address.get("streetAddress"), address.get("addressLocality"), region_zip]
        return ", ".join(str(part) for part in parts if part)


structured_data_parser = StructuredDataParser()
