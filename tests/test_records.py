"""Tests for record models, per-page assembly and fill-only merging."""

import json

import pytest
from pydantic import ValidationError

from knowledge_scout.assembler import PageExtraction, PageExtractor, finalize, start_record
from knowledge_scout.extractors.offerings import GENERAL_OFFERING
from knowledge_scout.merge import fill_category, merge_offerings, merge_page, merge_people
from knowledge_scout.models import KnowledgeRecord, RecordBuilder, ScrapeOutcome, ScraperSettings
from knowledge_scout.utils import SETTINGS_ENV, load_settings

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _extraction(url="https://acme.example/about", **overrides) -> PageExtraction:
    """Build a PageExtraction with empty categories, override any field."""
    defaults = dict(
        url=url,
        categories={
            "company_foundation": {},
            "positioning": {},
            "market_customers": {},
            "branding_style": {},
            "online_presence": {},
            "extended": {},
        },
    )
    defaults.update(overrides)
    return PageExtraction(**defaults)


# ─── models ──────────────────────────────────────────────────────────────────


class TestModels:

    def test_record_is_frozen(self):
        record = RecordBuilder("https://acme.example").build()
        with pytest.raises(ValidationError):
            record.source_url = "https://other.example"

    def test_record_id_shape(self):
        record = RecordBuilder("https://acme.example").build()
        prefix, millis, suffix = record.id.split("_")
        assert prefix == "kb"
        assert millis.isdigit()
        assert len(suffix) == 7

    def test_outcome_uses_camel_case(self):
        builder = RecordBuilder("https://acme.example")
        builder.company_foundation.update({"year_founded": "1998", "alternative_names": ["Acme Co"]})
        builder.online_presence["linked_in"] = "https://linkedin.com/company/acme"
        data = ScrapeOutcome(success=True, record=builder.build()).to_dict()

        assert data["success"] is True
        assert "error" not in data
        record = data["record"]
        assert record["sourceUrl"] == "https://acme.example"
        assert record["companyFoundation"]["yearFounded"] == "1998"
        assert record["companyFoundation"]["alternativeNames"] == ["Acme Co"]
        assert record["onlinePresence"]["linkedIn"] == "https://linkedin.com/company/acme"
        json.dumps(data)

    def test_failed_outcome(self):
        assert ScrapeOutcome(success=False, error="HTTP 500: Internal Server Error").to_dict() == {
            "success": False,
            "error": "HTTP 500: Internal Server Error",
        }

    def test_unknown_category(self):
        with pytest.raises(KeyError):
            RecordBuilder("https://acme.example").category("nope")

    def test_settings_overrides(self):
        settings = ScraperSettings(max_bio_fetches=3, browser_fallback=False)
        assert settings.max_bio_fetches == 3
        assert "/about" in settings.candidate_paths

    def test_settings_file_from_environment(self, tmp_path, monkeypatch):
        config = tmp_path / "scout.yaml"
        config.write_text("max_bio_fetches: 4\nmain_timeout: 30\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV, str(config))
        load_settings.cache_clear()
        try:
            settings = ScraperSettings.from_settings({"max_bio_fetches": 2})
        finally:
            load_settings.cache_clear()
        assert settings.main_timeout == 30
        assert settings.max_bio_fetches == 2

    def test_non_mapping_settings_ignored(self, tmp_path, monkeypatch):
        config = tmp_path / "scout.yaml"
        config.write_text("- just\n- a list\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV, str(config))
        load_settings.cache_clear()
        try:
            assert load_settings() == {}
        finally:
            load_settings.cache_clear()

    def test_record_round_trips_from_json(self):
        record = RecordBuilder("https://acme.example").build()
        again = KnowledgeRecord.model_validate(record.model_dump(by_alias=True))
        assert again == record


# ─── assembly ────────────────────────────────────────────────────────────────


class TestAssembly:

    def test_json_ld_facts(self, make_page, settings):
        org = {
            "@context": "https://schema.org",
            "@type": "Organization",
            "name": "Acme Co",
            "foundingDate": "2005-03-01",
        }
        page = make_page(
            "<p>Since 1990 we have been framing houses.</p>",
            title="Acme Construction | Home",
            head=f'<script type="application/ld+json">{json.dumps(org)}</script>',
        )
        extraction = PageExtractor(settings).extract(page)
        foundation = extraction.categories["company_foundation"]
        assert foundation["year_founded"] == "2005"
        assert "Acme Co" in foundation["alternative_names"]
        assert foundation["website"] == "https://acme.example"

    def test_alternative_names_fall_back_to_host(self, make_page, settings):
        page = make_page("<p>Hello</p>", url="https://acme.example/", title="")
        extraction = PageExtractor(settings).extract(page)
        assert extraction.categories["company_foundation"]["alternative_names"] == ["acme.example"]

    def test_empty_values_dropped(self, make_page, settings):
        extraction = PageExtractor(settings).extract(make_page("<p>Hello</p>"))
        for values in extraction.categories.values():
            assert all(value not in (None, "", []) for value in values.values())

    def test_finalize_adds_placeholder(self):
        builder = finalize(RecordBuilder("https://acme.example"))
        assert builder.offerings == [{"name": GENERAL_OFFERING, "type": "service"}]
        assert builder.extended["customer_gets"] == GENERAL_OFFERING

    def test_start_record_caps_people(self):
        people = [{"name": f"Person {chr(65 + i)} Smith"} for i in range(24)]
        builder = start_record(_extraction(url="https://acme.example", key_people=people))
        assert len(builder.key_people) == 20


# ─── merging ─────────────────────────────────────────────────────────────────


class TestMerge:

    def test_scalars_fill_only_if_empty(self):
        current = {"phone": "(555) 123-4567"}
        changed = fill_category("company_foundation", current, {"phone": "(555) 999-0000", "email": "a@acmeco.com"})
        assert current == {"phone": "(555) 123-4567", "email": "a@acmeco.com"}
        assert changed == ["email"]

    def test_lists_union_with_cap(self):
        current = {"channels": ["Email", "Phone"]}
        fill_category("market_customers", current, {"channels": ["phone", "Webinars"] + [f"C{i}" for i in range(10)]})
        assert current["channels"][:3] == ["Email", "Phone", "Webinars"]
        assert len(current["channels"]) == 8

    def test_alternative_names_not_unioned(self):
        current = {"alternative_names": ["Acme Co"]}
        fill_category("company_foundation", current, {"alternative_names": ["About Acme"]})
        assert current["alternative_names"] == ["Acme Co"]

    def test_testimonials_dedupe_by_prefix(self):
        quote = "Acme rebuilt our kitchen on time and on budget, and the crew left the house spotless every day."
        current = {"testimonials": [quote]}
        fill_category("extended", current, {"testimonials": [quote.upper() + " More words here."]})
        assert current["testimonials"] == [quote]

    def test_merge_people_fills_missing_fields(self):
        current = [{"name": "Jane Doe", "title": "CEO"}]
        merged = merge_people(current, [
            {"name": "JANE DOE", "title": "Owner", "email": "jane@acmeco.com"},
            {"name": "John Smith"},
        ])
        assert merged == [
            {"name": "Jane Doe", "title": "CEO", "email": "jane@acmeco.com"},
            {"name": "John Smith"},
        ]

    def test_merge_people_cap(self):
        current = [{"name": f"Person {chr(65 + i)} Smith"} for i in range(20)]
        more = [{"name": f"Person {chr(65 + i)} Jones"} for i in range(10)]
        assert len(merge_people(current, more)) == 25

    def test_sparse_offerings_replaced_by_service_page(self):
        current = [{"name": "Roofing", "type": "service"}, {"name": "Gutters", "type": "service"}]
        detailed = [{"name": "Roofing", "type": "service", "description": "Full roof replacement and repair."}]
        merged = merge_offerings(current, detailed, service_like=True)
        assert merged[0]["description"] == "Full roof replacement and repair."
        assert [o["name"] for o in merged] == ["Roofing", "Gutters"]

    def test_rich_offerings_kept(self):
        current = [{"name": "Roofing", "type": "service", "features": ["Shingles"]}]
        detailed = [{"name": "Siding", "type": "service", "description": "Vinyl and fiber cement siding."}]
        assert merge_offerings(current, detailed, service_like=True) == current

    def test_non_service_page_never_replaces(self):
        current = [{"name": "Roofing", "type": "service"}]
        detailed = [{"name": "Siding", "type": "service", "description": "Vinyl and fiber cement siding."}]
        assert merge_offerings(current, detailed, service_like=False) == current

    def test_merge_page_never_overwrites(self):
        builder = RecordBuilder("https://acme.example")
        builder.company_foundation["phone"] = "(555) 123-4567"
        extraction = _extraction()
        extraction.categories["company_foundation"] = {"phone": "(555) 000-1111", "year_founded": "1998"}
        extraction.bio_links = [("Jane Doe", "https://acme.example/team/jane")]
        merge_page(builder, extraction)
        assert builder.company_foundation == {"phone": "(555) 123-4567", "year_founded": "1998"}
        assert builder.bio_links == [("Jane Doe", "https://acme.example/team/jane")]
