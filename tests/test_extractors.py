"""Tests for the per-field extractors run on single pages."""

import json

from knowledge_scout.extractors.base import first_result, unique
from knowledge_scout.extractors.contact import contact_extractor
from knowledge_scout.extractors.extended import extended_extractor
from knowledge_scout.extractors.founding import founding_extractor
from knowledge_scout.extractors.offerings import offerings_extractor
from knowledge_scout.extractors.people import people_extractor, split_name_title
from knowledge_scout.extractors.social import presence_from_urls, social_extractor
from knowledge_scout.extractors.structured_data import structured_data_parser
from knowledge_scout.extractors.testimonials import dedupe_testimonials, testimonial_extractor


def json_ld(data) -> str:
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


# ─── base helpers ────────────────────────────────────────────────────────────


class TestStrategyHelpers:

    def test_first_result_skips_empty_and_invalid(self):
        strategies = [lambda x: None, lambda x: "no", lambda x: "yes please"]
        assert first_result(strategies, 1, validate=lambda v: v if len(v) > 3 else None) == "yes please"

    def test_first_result_none_when_exhausted(self):
        assert first_result([lambda: None, lambda: ""]) is None

    def test_unique_is_case_insensitive_and_ordered(self):
        assert unique(["Alpha", "beta", "ALPHA", " gamma ", ""], limit=5) == ["Alpha", "beta", "gamma"]

    def test_unique_limit(self):
        assert unique(["a1", "a2", "a3"], limit=2) == ["a1", "a2"]


# ─── people ──────────────────────────────────────────────────────────────────


class TestPeople:

    def test_split_name_title_dash(self):
        assert split_name_title("Jane Doe - CEO") == ("Jane Doe", "CEO")

    def test_split_name_title_plain(self):
        assert split_name_title("Jane Doe") == ("Jane Doe", None)

    def test_heading_with_email(self, make_page):
        """A bare h3 name beside a mailto link yields exactly one person with that email."""
        page = make_page('<div><h3>Jane Doe</h3><a href="mailto:jane@acmeco.com">jane@acmeco.com</a></div>')
        people = people_extractor.extract(page)
        assert people == [{"name": "Jane Doe", "email": "jane@acmeco.com"}]

    def test_team_card(self, make_page):
        page = make_page(
            '<section class="team"><div class="team-card"><h3>John Smith</h3>'
            '<p class="title">Founder &amp; CEO</p>'
            "<p>With over twenty years in residential construction, he guides every project personally.</p>"
            "</div></section>"
        )
        people = people_extractor.extract(page)
        assert len(people) == 1
        assert people[0]["name"] == "John Smith"
        assert people[0]["title"] == "Founder & CEO"
        assert people[0]["description"].startswith("With over twenty years")

    def test_testimonial_authors_are_not_staff(self, make_page):
        page = make_page(
            '<section class="testimonials"><h2>What our clients say</h2>'
            '<div class="card"><h3>Mary Johnson</h3><p>They finished our deck two weeks early.</p></div></section>'
        )
        assert people_extractor.extract(page) == []

    def test_duplicate_names_collapse(self, make_page):
        page = make_page(
            '<section class="team">'
            '<div class="member-card"><h3>Jane Doe</h3><p class="role">Director</p></div>'
            '<div class="member-card"><h3>JANE DOE</h3><p class="role">Manager</p></div>'
            "</section>"
        )
        people = people_extractor.extract(page)
        assert [p["name"] for p in people] == ["Jane Doe"]
        assert people[0]["title"] == "Director"

    def test_bio_links(self, make_page):
        """Cards with a thin bio and a same-origin profile link become bio links."""
        page = make_page(
            '<section class="team"><div class="team-card"><h3>Jane Doe</h3>'
            '<a href="/team/jane-doe">Read bio</a>'
            '<a href="https://elsewhere.example/jane">Elsewhere</a></div></section>'
        )
        assert people_extractor.bio_links(page) == [("Jane Doe", "https://acme.example/team/jane-doe")]


# ─── contact ─────────────────────────────────────────────────────────────────


class TestContact:

    def test_email_skips_legal_mailbox(self, make_page):
        page = make_page(
            '<a href="mailto:legal@acmeco.com">Legal</a><a href="mailto:hello@acmeco.com?subject=Hi">Email</a>'
        )
        assert contact_extractor.extract_email(page) == "hello@acmeco.com"

    def test_phone_from_tel_link(self, make_page):
        page = make_page('<a href="tel:+1-555-123-4567">Call us</a>')
        assert contact_extractor.extract_phone(page) == "(555) 123-4567"

    def test_address_in_footer(self, make_page):
        page = make_page("<main><p>Welcome.</p></main><footer>Acme Co, 123 Main Street, Springfield, IL 62701</footer>")
        assert contact_extractor.extract_address(page) == "123 Main Street, Springfield, IL 62701"

    def test_address_only_inside_legal_modal_rejected(self, make_page):
        """An address that appears only inside a terms modal is not the company address."""
        page = make_page(
            '<div class="modal terms"><p>Acme Co, 123 Main Street, Springfield, IL 62701</p></div>'
            "<p>Short welcome.</p>"
        )
        assert contact_extractor.extract_address(page) is None

    def test_address_in_modal_and_footer_kept(self, make_page):
        page = make_page(
            '<div class="modal terms"><p>Acme Co, 123 Main Street, Springfield, IL 62701</p></div>'
            "<footer>123 Main Street, Springfield, IL 62701</footer>"
        )
        assert contact_extractor.extract_address(page) == "123 Main Street, Springfield, IL 62701"

    def test_itemprop_address_first(self, make_page):
        page = make_page(
            '<div itemprop="address">500 Oak Avenue, Denver, CO 80202</div>'
            "<footer>123 Main Street, Springfield, IL 62701</footer>"
        )
        assert contact_extractor.extract_address(page) == "500 Oak Avenue, Denver, CO 80202"


# ─── founding facts ──────────────────────────────────────────────────────────


class TestFounding:

    def test_year_label_in_about(self, make_page):
        page = make_page("<div class='about'><p>Year Founded: 1998</p></div>")
        assert founding_extractor.extract_year_founded(page) == "1998"

    def test_founded_in_phrase(self, make_page):
        page = make_page("<p>Acme was established in 2003 by two brothers.</p>")
        assert founding_extractor.extract_year_founded(page) == "2003"

    def test_copyright_is_last_resort(self, make_page):
        page = make_page("<p>Quality work, every time.</p><footer>© 2015 Acme Co</footer>")
        assert founding_extractor.extract_year_founded(page) == "2015"

    def test_employee_count_and_entity(self, make_page):
        page = make_page("<p>Acme Co LLC is a team of 25 employees.</p>")
        facts = founding_extractor.extract(page)
        assert facts["employee_count"] == "25"
        assert facts["legal_entity_type"] == "LLC"

    def test_entity_is_case_sensitive(self, make_page):
        """'co' or 'limited' in ordinary prose is not a legal entity."""
        page = make_page("<p>We offer limited availability in winter.</p>")
        assert founding_extractor.extract_legal_entity_type(page) is None


# ─── testimonials ────────────────────────────────────────────────────────────


class TestTestimonials:

    def test_dedupe_by_prefix(self):
        a = "Acme rebuilt our kitchen on time and on budget, and the crew left the house spotless every day."
        b = a.upper() + " Extra trailing words."
        assert dedupe_testimonials([a, b]) == [a]

    def test_dedupe_length_bounds(self):
        assert dedupe_testimonials(["Too short", "x" * 900]) == []

    def test_json_ld_reviews_win(self, make_page):
        review = {
            "@context": "https://schema.org",
            "@type": "Review",
            "reviewBody": "Acme rebuilt our kitchen on time and on budget.",
            "author": {"@type": "Person", "name": "Pat Lee"},
        }
        page = make_page(
            '<div class="testimonial">A different quote that should not be used here.</div>',
            head=json_ld(review),
        )
        assert testimonial_extractor.extract(page) == ["Pat Lee: Acme rebuilt our kitchen on time and on budget."]

    def test_review_container(self, make_page):
        page = make_page('<blockquote>Honest pricing and great communication from start to finish.</blockquote>')
        assert testimonial_extractor.extract(page) == [
            "Honest pricing and great communication from start to finish."
        ]


# ─── structured data ─────────────────────────────────────────────────────────


class TestStructuredData:

    def test_malformed_block_does_not_hide_valid_one(self):
        org = {"@context": "https://schema.org", "@type": "Organization", "name": "Acme Co", "foundingDate": "2005"}
        html = (
            '<html><head><script type="application/ld+json">{not json</script>'
            f"{json_ld(org)}</head><body></body></html>"
        )
        items = structured_data_parser.json_ld_items(html, "https://acme.example")
        facts = structured_data_parser.organization(items)
        assert facts["name"] == "Acme Co"
        assert facts["year_founded"] == "2005"

    def test_graph_and_address(self):
        items = [{
            "@type": "LocalBusiness",
            "name": "Acme Co",
            "telephone": "555-123-4567",
            "address": {
                "@type": "PostalAddress",
                "streetAddress": "123 Main Street",
                "addressLocality": "Springfield",
                "addressRegion": "IL",
                "postalCode": "62701",
            },
            "sameAs": "https://www.facebook.com/acmeco",
        }]
        facts = structured_data_parser.organization(items)
        assert facts["address"] == "123 Main Street, Springfield, IL 62701"
        assert facts["phone"] == "(555) 123-4567"
        assert facts["same_as"] == ["https://www.facebook.com/acmeco"]

    def test_faq_page(self):
        items = [{
            "@type": "FAQPage",
            "mainEntity": [{
                "@type": "Question",
                "name": "Do you offer free estimates?",
                "acceptedAnswer": {"@type": "Answer", "text": "<p>Yes, for every project.</p>"},
            }],
        }]
        assert structured_data_parser.faq(items) == [
            {"question": "Do you offer free estimates?", "answer": "Yes, for every project."}
        ]


# ─── offerings ───────────────────────────────────────────────────────────────

SERVICE_CARD = (
    '<section class="services"><div class="service-card"><h3>Kitchen Remodeling</h3>'
    "<p>Full kitchen renovations from design through installation, handled by our own crews.</p>"
    "<ul><li>Custom cabinetry</li><li>Quartz countertops</li></ul>"
    "<p>Pricing: From $5,000</p></div></section>"
)


class TestOfferings:

    def test_detailed_card(self, make_page):
        offerings = offerings_extractor.detailed(make_page(SERVICE_CARD))
        assert len(offerings) == 1
        kitchen = offerings[0]
        assert kitchen["name"] == "Kitchen Remodeling"
        assert "Custom cabinetry" in kitchen["features"]
        assert kitchen["pricing"] == "From $5,000"
        assert kitchen["description"].startswith("Full kitchen renovations")

    def test_extract_puts_detailed_first(self, make_page):
        offerings, customer_gets = offerings_extractor.extract(make_page(SERVICE_CARD))
        assert offerings[0]["name"] == "Kitchen Remodeling"
        assert "Kitchen Remodeling" in customer_gets

    def test_skips_non_service_headings(self, make_page):
        page = make_page(
            '<section class="services"><div class="card"><h3>Why Choose Us</h3>'
            "<p>We have been the most trusted builder in the county for three decades running.</p></div></section>"
        )
        assert offerings_extractor.detailed(page) == []

    def test_title_implied_offerings(self, make_page):
        page = make_page("<p>Serving local families.</p>", title="Smith Tax Services")
        offerings, _ = offerings_extractor.extract(page)
        assert "Tax preparation and filing" in [o["name"] for o in offerings]


# ─── social / extended ───────────────────────────────────────────────────────


class TestSocialAndExtended:

    def test_presence_from_urls(self):
        presence = presence_from_urls([
            "https://www.linkedin.com/company/acme",
            "https://x.com/acme",
            "https://www.tiktok.com/@acme",
            "https://www.linkedin.com/company/other",
        ])
        assert presence == {
            "linked_in": "https://www.linkedin.com/company/acme",
            "twitter_x": "https://x.com/acme",
            "other_social": ["https://www.tiktok.com/@acme"],
        }

    def test_page_links_win_over_same_as(self, make_page):
        page = make_page('<a href="https://facebook.com/acme-page">Facebook</a>')
        presence = social_extractor.extract(
            page, same_as=["https://facebook.com/acme-json", "https://instagram.com/acme"]
        )
        assert presence["facebook"] == "https://facebook.com/acme-page"
        assert presence["instagram"] == "https://instagram.com/acme"

    def test_faq_json_ld_then_dom(self, make_page):
        faq_page = {
            "@context": "https://schema.org",
            "@type": "FAQPage",
            "mainEntity": [{
                "@type": "Question",
                "name": "Do you offer free estimates?",
                "acceptedAnswer": {"@type": "Answer", "text": "Yes, for every project."},
            }],
        }
        page = make_page(
            '<div class="faq"><h3>Do you offer free estimates?</h3><p>Duplicate answer.</p>'
            "<h3>Are you insured?</h3><p>Fully licensed and insured.</p></div>",
            head=json_ld(faq_page),
        )
        assert extended_extractor.faq(page) == [
            {"question": "Do you offer free estimates?", "answer": "Yes, for every project."},
            {"question": "Are you insured?", "answer": "Fully licensed and insured."},
        ]

    def test_ctas(self, make_page):
        page = make_page('<a href="/contact">Contact Us</a><button>Get Started</button><a href="/">Home</a>')
        assert extended_extractor.ctas(page) == ["Contact Us", "Get Started"]
