"""
Tests for line cleanup and section detection
"""
from resume_ingest.services.resumes.extraction.sections import (
    DATE_RANGE_RE,
    classify_heading,
    dedupe_preserve_order,
    find_section,
    inline_heading_content,
    is_bullet,
    split_lines,
    strip_bullet,
)


class TestClassifyHeading:
    """Heading recognition by dictionary and formatting"""

    def test_dictionary_headings(self):
        assert classify_heading("EXPERIENCE") == "experience"
        assert classify_heading("Work Experience:") == "experience"
        assert classify_heading("Education") == "education"
        assert classify_heading("## Skills") == "skills"

    def test_formatted_heading_with_extra_words(self):
        assert classify_heading("TECHNICAL SKILLS & TOOLS:") == "skills"

    def test_single_trailing_heading_word_is_not_a_heading(self):
        assert classify_heading("IBM RESEARCH") is None
        assert classify_heading("CUSTOMER EXPERIENCE") is None
        assert classify_heading("RELEVANT WORK EXPERIENCE") == "experience"

    def test_regular_lines_are_not_headings(self):
        assert classify_heading("Senior Software Engineer") is None
        assert classify_heading("Built a payments API in Python") is None
        assert classify_heading("") is None

    def test_long_lines_are_never_headings(self):
        assert classify_heading("EXPERIENCE " + "X" * 60) is None


class TestFindSection:
    """Blocks between headings"""

    def test_block_ends_at_next_heading(self):
        lines = split_lines("SUMMARY\nLine one\nLine two\nEDUCATION\nState University")
        assert find_section(lines, "summary") == ["Line one", "Line two"]
        assert find_section(lines, "education") == ["State University"]

    def test_missing_section_is_none(self):
        assert find_section(["SKILLS", "Python"], "experience") is None

    def test_empty_section_is_empty_list(self):
        assert find_section(["PROJECTS", "SKILLS", "Python"], "projects") == []

    def test_inline_heading(self):
        lines = ["Summary: Engineer who ships"]
        assert inline_heading_content(lines, ["summary"]) == "Engineer who ships"


class TestLines:
    """Bullets, whitespace and dedupe helpers"""

    def test_split_lines_drops_blanks_and_collapses_space(self):
        assert split_lines("  a   b \n\n c ") == ["a b", "c"]

    def test_bullets(self):
        assert is_bullet("• Built X")
        assert is_bullet("- Built X")
        assert is_bullet("* Built X")
        assert is_bullet("1. Built X")
        assert not is_bullet("Built X")
        assert strip_bullet("•  Built X") == "Built X"

    def test_dedupe_is_case_insensitive_and_ordered(self):
        assert dedupe_preserve_order(["Python", "python", "", "Go", "PYTHON"]) == ["Python", "Go"]

    def test_date_range(self):
        m = DATE_RANGE_RE.search("Acme Corp | Jan 2020 - Present")
        assert m.group("start") == "Jan 2020"
        assert m.group("end").lower() == "present"
