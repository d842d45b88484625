"""
Tests for contact and name extraction
"""
from resume_ingest.services.resumes.extraction.contact import (
    NAME_STRATEGIES,
    NameParts,
    caps_name,
    caps_name_with_initial,
    extract_contact,
    extract_email,
    extract_location,
    extract_name,
    extract_phones,
    name_from_email,
    title_case_name,
    title_case_name_with_initial,
)


class TestContactFields:
    """Email, phone, links and location"""

    def test_email_and_phone_from_sentence(self):
        text = "Reach me at jane.doe@example.com or (512) 555-1234."
        contact = extract_contact(text)
        assert contact.email == "jane.doe@example.com"
        digits = "".join(ch for ch in contact.phone if ch.isdigit())
        assert digits.index("512") < digits.index("555") < digits.index("1234")

    def test_invalid_email_candidates_are_skipped(self):
        assert extract_email("contact: bad..dots@example.com or ok.one@example.org") == "ok.one@example.org"

    def test_no_email(self):
        assert extract_email("no address here") == ""

    def test_phone_formats_are_deduplicated(self):
        phones = extract_phones("Cell: 512-555-1234 | Work: +1 512 555 1234 | Home: (737) 555-0000")
        assert phones == ["(737) 555-0000", "512-555-1234"]

    def test_short_digit_runs_are_not_phones(self):
        assert extract_phones("Reduced latency by 40% across 1200 hosts in 2021") == []

    def test_links_are_normalized_to_https(self):
        contact = extract_contact(
            "JANE DOE\nlinkedin.com/in/janedoe | http://github.com/janedoe | https://janedoe.dev"
        )
        assert contact.linkedin == "https://linkedin.com/in/janedoe"
        assert contact.github == "https://github.com/janedoe"
        assert contact.website == "https://janedoe.dev"

    def test_location_known_city(self):
        assert extract_location("Austin, TX | jane@example.com") == "Austin, TX"

    def test_location_city_state_requires_real_state(self):
        assert extract_location("Springfield, IL") == "Springfield, IL"
        assert extract_location("Springfield, ZZ") == ""

    def test_location_does_not_span_lines(self):
        assert extract_location("JOHN SMITH\nFrisco, TX | john.smith@example.com") == "Frisco, TX"


class TestNameStrategies:
    """Each strategy in isolation"""

    def test_caps_with_initial(self):
        assert caps_name_with_initial("JOHN Q. PUBLIC") == NameParts("John", "Q.", "Public")

    def test_caps_pair(self):
        assert caps_name("SHARIF AHMED") == NameParts("Sharif", "", "Ahmed")

    def test_caps_pair_rejects_job_titles(self):
        assert caps_name("SOFTWARE ENGINEER") is None
        assert caps_name("SENIOR DEVELOPER") is None
        assert caps_name("BAR ASSOCIATION") is None

    def test_title_case_pair(self):
        assert title_case_name("Jane Doe") == NameParts("Jane", "", "Doe")
        assert title_case_name("Jane") is None

    def test_title_case_with_initial(self):
        assert title_case_name_with_initial("Jane A. Doe") == NameParts("Jane", "A.", "Doe")

    def test_priority_order(self):
        assert NAME_STRATEGIES[0] is caps_name_with_initial
        assert NAME_STRATEGIES[1] is caps_name


class TestExtractName:
    """Cascade over the top lines"""

    def test_all_caps_first_line(self):
        lines = ["SHARIF AHMED", "Software Engineer", "Dallas, TX"]
        assert extract_name(lines) == NameParts("Sharif", "", "Ahmed")

    def test_contact_lines_and_headings_are_skipped(self):
        lines = ["jane@example.com | (512) 555-1234", "SUMMARY", "Jane A. Doe"]
        assert extract_name(lines) == NameParts("Jane", "A.", "Doe")

    def test_title_lines_fall_through_to_next_line(self):
        lines = ["SENIOR ENGINEER", "MARIA LOPEZ"]
        assert extract_name(lines) == NameParts("Maria", "", "Lopez")

    def test_email_fallback(self):
        lines = ["jane.doe@example.com", "https://janedoe.dev"]
        assert extract_name(lines, email="jane.doe@example.com") == NameParts("Jane", "", "Doe")

    def test_no_name(self):
        assert extract_name(["jane@example.com"]) is None

    def test_custom_strategy_list(self):
        lines = ["SHARIF AHMED"]
        assert extract_name(lines, strategies=[title_case_name]) is None

    def test_name_from_email_ignores_digits(self):
        assert name_from_email("jdoe99@example.com") is None
        assert name_from_email("maria_lopez@example.com") == NameParts("Maria", "", "Lopez")

    def test_contact_record(self, sample_text):
        contact = extract_contact(sample_text)
        assert (contact.first_name, contact.last_name) == ("Jane", "Doe")
        assert contact.email == "jane.doe@example.com"
        assert contact.location == "Austin, TX"
        assert contact.full_name == "Jane Doe"
        assert not contact.is_empty()
