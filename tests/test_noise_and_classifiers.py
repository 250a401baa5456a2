"""Tests for noise classification, main-body text and industry/business-model inference."""

from knowledge_scout.classifiers import infer_business_model, infer_industry
from knowledge_scout.noise import noise_classifier


class TestNoise:

    def test_modal_is_noise(self, make_page):
        page = make_page('<div class="modal"><p id="inside">Sign up for our newsletter</p></div>')
        assert noise_classifier.is_inside_noise(page.soup.find(id="inside"))

    def test_hidden_bio_in_team_is_not_noise(self, make_page):
        """Collapsed bios inside team containers are content."""
        page = make_page('<div class="team"><div id="bio" style="display: none">Jane has 20 years...</div></div>')
        assert not noise_classifier.is_inside_noise(page.soup.find(id="bio"))

    def test_hidden_elsewhere_is_noise(self, make_page):
        page = make_page('<div id="promo" style="display:none">Limited time offer</div>')
        assert noise_classifier.is_noise(page.soup.find(id="promo"))

    def test_legal_texts_outermost_only(self, make_page):
        page = make_page('<div class="privacy">Policy text <div class="legal">Nested</div></div><p>Body</p>')
        assert page.legal_texts == ["Policy text Nested"]

    def test_main_text_strict_pass(self, make_page, filler_text):
        page = make_page(f'<p>{filler_text}</p><div class="cookie-banner">We use cookies</div>')
        assert "We use cookies" not in page.main_text
        assert page.main_text.startswith("Our crews handle")

    def test_main_text_loose_fallback(self, make_page):
        """A thin strict pass falls back to everything but display:none."""
        page = make_page('<div class="modal">Modal copy</div><p>Short.</p><p style="display:none">Hidden</p>')
        assert page.main_text == "Modal copy Short."

    def test_scripts_and_styles_excluded(self, make_page):
        page = make_page("<script>var x = 1;</script><style>p{color:red}</style><p>Visible copy</p>")
        assert page.main_text == "Visible copy"


class TestClassifiers:

    def test_industry_from_title(self):
        assert infer_industry("Smith CPA", "") == "Tax & Accounting"

    def test_industry_first_match_wins(self):
        assert infer_industry("", "Kitchen remodeling and landscaping") == "Construction"

    def test_industry_unknown(self):
        assert infer_industry("Acme", "Nothing to see") is None

    def test_business_model_self_description(self):
        text = "Welcome to Acme. We provide commercial roofing for warehouses across Ohio. Call today."
        assert infer_business_model(text) == "We provide commercial roofing for warehouses across Ohio."

    def test_business_model_keyword(self):
        assert infer_business_model("Monthly retainer packages for growing businesses") == "Subscription / Retainer"

    def test_business_model_not_selling(self):
        """'We do not sell' blocks the product label."""
        text = "Shop talk: we don't sell anything"
        assert infer_business_model(text) != "Product sales / E-commerce"
