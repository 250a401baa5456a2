"""Tests for the shape checks every extractor relies on."""

from datetime import datetime

from knowledge_scout.field_validators import FieldValidators

# ─── phone ───────────────────────────────────────────────────────────────────


class TestNormalizePhone:
    """Ten recoverable digits become (AAA) BBB-CCCC; anything else passes through."""

    def test_tel_link_with_country_code(self):
        assert FieldValidators.normalize_phone("tel:+1-555-123-4567") == "(555) 123-4567"

    def test_dotted_ten_digits(self):
        assert FieldValidators.normalize_phone("tel:555.123.4567") == "(555) 123-4567"

    def test_international_passes_through(self):
        """Non-NANP numbers are not reformatted."""
        assert FieldValidators.normalize_phone("+44 20 7946 0958") == "+44 20 7946 0958"

    def test_empty(self):
        assert FieldValidators.normalize_phone("") is None

    def test_find_in_text(self):
        """Free text yields the first ten-digit number, normalized."""
        text = "Call our office at 555-867-5309 today."
        assert FieldValidators.find_phone_in_text(text) == "(555) 867-5309"

    def test_find_in_text_without_number(self):
        assert FieldValidators.find_phone_in_text("No numbers here at all") is None


# ─── email / year ─────────────────────────────────────────────────────────────


class TestEmailAndYear:

    def test_valid_email(self):
        assert FieldValidators.validate_email("info@acmeco.com") == "info@acmeco.com"

    def test_invalid_email(self):
        assert FieldValidators.validate_email("not-an-email") is None

    def test_year_in_range(self):
        assert FieldValidators.validate_year("Founded 1998") == "1998"

    def test_year_too_old(self):
        assert FieldValidators.validate_year("1850") is None

    def test_year_far_future(self):
        """Next year is allowed, anything later is not."""
        assert FieldValidators.validate_year(str(datetime.now().year + 1)) is not None
        assert FieldValidators.validate_year(str(datetime.now().year + 2)) is None

    def test_year_from_iso_date(self):
        assert FieldValidators.validate_year("2005-04-01") == "2005"


# ─── person names ────────────────────────────────────────────────────────────


class TestPersonNames:

    def test_plain_name(self):
        assert FieldValidators.validate_person_name("  Jane   Doe ") == "Jane Doe"

    def test_single_word_rejected(self):
        assert FieldValidators.validate_person_name("Jane") is None

    def test_nav_label_rejected(self):
        assert FieldValidators.validate_person_name("Learn More") is None

    def test_service_heading_rejected(self):
        """Headings like 'Water Well Drilling' are not people."""
        assert FieldValidators.validate_person_name("Water Well Drilling") is None

    def test_place_rejected(self):
        assert FieldValidators.validate_person_name("Palm Beach") is None

    def test_digits_rejected(self):
        assert FieldValidators.validate_person_name("Suite 200 Office") is None

    def test_person_key(self):
        assert FieldValidators.person_key(" Jane  DOE ") == "jane doe"


# ─── addresses ───────────────────────────────────────────────────────────────


class TestAddresses:

    def test_street_city_state_zip(self):
        text = "Visit us at 123 Main Street, Springfield, IL 62701 for a consultation."
        assert FieldValidators.match_address(text) == "123 Main Street, Springfield, IL 62701"

    def test_city_state_zip(self):
        assert FieldValidators.match_address("Boynton Beach, Florida 33437") == "Boynton Beach, Florida 33437"

    def test_no_commas_street_state_zip(self):
        address = FieldValidators.match_address("Office: 8630 W Sunrise Blvd Plantation FL 33322")
        assert address is not None
        assert address.endswith("FL 33322")

    def test_navigation_text_rejected(self):
        assert FieldValidators.validate_address("Home About Us Services Contact Us") is None

    def test_validate_keeps_whole_value(self):
        value = "123 Main Street, Springfield, IL 62701"
        assert FieldValidators.validate_address(value) == value
