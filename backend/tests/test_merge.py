"""
Tests for reconciling the LLM and pattern extractions
"""
from resume_ingest.schemas.resume import (
    CertificationEntry,
    ContactRecord,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ProjectEntry,
)
from resume_ingest.services.resumes.merge import merge_extractions


def _pattern() -> ExtractionResult:
    return ExtractionResult(
        contact=ContactRecord(first_name="Jane", last_name="Doe", email="jane@example.com"),
        summary="Pattern summary",
        experience=[
            ExperienceEntry(company="Acme Corp", position="Engineer", start_date="Jan 2020", end_date="Present", current=True),
            ExperienceEntry(company="Globex", position="Developer", start_date="Jun 2016", end_date="Dec 2019"),
        ],
        education=[EducationEntry(institution="State University", degree="B.S.", start_date="2012", end_date="2016")],
        skills={"technical": ["Python"], "tools": [], "soft": []},
    )


def _ai() -> ExtractionResult:
    return ExtractionResult(
        contact=ContactRecord(first_name="Jane", middle_name="A.", last_name="Doe"),
        experience=[
            ExperienceEntry(company="Initech", position="Staff Engineer", start_date="November 2023", end_date="current"),
        ],
        skills={"Technical Skills": []},
    )


class TestGroupSelection:
    """Non-empty AI groups win as a whole"""

    def test_ai_experience_replaces_pattern_experience(self, id_factory):
        merged = merge_extractions(_ai(), _pattern(), source_type="pdf", id_factory=id_factory)

        assert [e.company for e in merged.experience] == ["Initech"]
        assert merged.sources["experience"] == "ai"

    def test_no_ai_result_uses_pattern(self, id_factory):
        merged = merge_extractions(None, _pattern(), source_type="pdf", id_factory=id_factory)

        assert [e.company for e in merged.experience] == ["Acme Corp", "Globex"]
        assert set(merged.sources.values()) == {"pattern"}

    def test_empty_ai_groups_fall_back(self, id_factory):
        merged = merge_extractions(_ai(), _pattern(), source_type="docx", id_factory=id_factory)

        assert merged.summary == "Pattern summary"
        assert merged.sources["summary"] == "pattern"
        assert merged.education[0].institution == "State University"
        # all-empty AI skills categories count as no skills
        assert merged.skills == {"technical": ["Python"], "tools": [], "soft": []}
        assert merged.sources["skills"] == "pattern"

    def test_contact_is_taken_whole_not_blended(self, id_factory):
        merged = merge_extractions(_ai(), _pattern(), source_type="pdf", id_factory=id_factory)

        assert merged.contact.middle_name == "A."
        assert merged.contact.email == ""
        assert merged.sources["contact"] == "ai"


class TestPostProcessing:
    """Ids and canonical dates"""

    def test_ids_come_from_the_factory(self, id_factory):
        merged = merge_extractions(None, _pattern(), source_type="pdf", id_factory=id_factory)

        ids = [e.id for e in merged.experience] + [e.id for e in merged.education]
        assert ids == ["id-1", "id-2", "id-3"]

    def test_dates_are_canonical(self, id_factory):
        merged = merge_extractions(None, _pattern(), source_type="pdf", id_factory=id_factory)

        first, second = merged.experience
        assert (first.start_date, first.end_date, first.current) == ("2020-01", "Present", True)
        assert (second.start_date, second.end_date, second.current) == ("2016-06", "2019-12", False)
        # bare years are not a supported date form
        assert (merged.education[0].start_date, merged.education[0].end_date) == ("", "")

    def test_present_word_forces_current(self, id_factory):
        merged = merge_extractions(_ai(), _pattern(), source_type="pdf", id_factory=id_factory)

        job = merged.experience[0]
        assert job.start_date == "2023-11"
        assert job.end_date == "Present"
        assert job.current is True

    def test_current_flag_forces_present(self, id_factory):
        pattern = ExtractionResult(
            experience=[ExperienceEntry(company="Acme", start_date="2021-02", end_date="2022-03", current=True)],
            projects=[ProjectEntry(name="Tracker", end_date="now")],
            certifications=[CertificationEntry(name="CKA", date="Mar 2022", expiry_date="2025-03-01")],
        )
        merged = merge_extractions(None, pattern, source_type="pdf", id_factory=id_factory)

        assert merged.experience[0].end_date == "Present"
        assert merged.projects[0].current is True
        assert merged.projects[0].end_date == "Present"
        assert (merged.certifications[0].date, merged.certifications[0].expiry_date) == ("2022-03", "2025-03")

    def test_inputs_are_not_mutated(self, id_factory):
        pattern = _pattern()
        merge_extractions(None, pattern, source_type="pdf", id_factory=id_factory)
        assert pattern.experience[0].id == ""
        assert pattern.experience[0].start_date == "Jan 2020"

    def test_metadata(self, id_factory):
        merged = merge_extractions(None, _pattern(), source_type="docx", id_factory=id_factory, created_at="2024-01-01T00:00:00Z")
        assert merged.source_type == "docx"
        assert merged.created_at == "2024-01-01T00:00:00Z"
