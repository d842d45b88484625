"""
Tests for the LLM extractor and its payload validation
"""
import json

import pytest

from conftest import FakeLLMClient
from resume_ingest.core.config import settings
from resume_ingest.schemas.resume import EducationEntry, ExperienceEntry
from resume_ingest.services.common.llm_client import LLMClient, _JSONResponse
from resume_ingest.services.resumes.extraction.llm_boost import (
    RESUME_PARSE_SCHEMA,
    coerce_entries,
    coerce_llm_payload,
    coerce_skills,
    extract_with_llm,
)

LLM_PAYLOAD = {
    "contact": {"firstName": "Jane", "middleName": "A.", "lastName": "Doe", "email": "jane@example.com"},
    "summary": "Backend engineer.",
    "experience": [
        {"company": "Acme Corp", "position": "Staff Engineer", "startDate": "2020-01", "endDate": "Present",
         "current": True, "achievements": ["Built X", None, 42]},
        {"company": "", "position": ""},
        "not an object",
    ],
    "education": [{"institution": "UT Austin", "degree": "B.S.", "fieldOfStudy": "CS", "gpa": 3.8}],
    "skills": {"Technical Skills": ["Python", "python", "Go"], "Empty": [], "Bad": "Python"},
}


class TestExtractWithLLM:
    """Soft failure and the happy path"""

    def test_unconfigured_client_returns_none(self, unconfigured_client):
        assert not unconfigured_client.is_configured
        assert extract_with_llm("resume text", client=unconfigured_client) is None

    def test_disabled_by_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "USE_LLM_EXTRACTION", False)
        client = FakeLLMClient(LLM_PAYLOAD)
        assert extract_with_llm("resume text", client=client) is None
        assert client.calls == []

    def test_error_payload_returns_none(self):
        client = FakeLLMClient({"__llm_error__": "timeout"})
        assert extract_with_llm("resume text", client=client) is None

    def test_payload_is_coerced(self):
        client = FakeLLMClient(LLM_PAYLOAD)
        result = extract_with_llm("## EXPERIENCE\nStaff Engineer", client=client)

        assert result.contact.first_name == "Jane"
        assert result.contact.middle_name == "A."
        assert len(result.experience) == 1
        assert result.experience[0].achievements == ["Built X", "42"]
        assert result.experience[0].current is True
        assert result.education[0].field_of_study == "CS"
        assert result.education[0].gpa == "3.8"
        assert result.skills == {"Technical Skills": ["Python", "Go"]}

    def test_schema_and_prompt_are_sent(self):
        client = FakeLLMClient(LLM_PAYLOAD)
        extract_with_llm("resume text", client=client)

        call = client.calls[0]
        assert call["json_schema"] is RESUME_PARSE_SCHEMA
        assert call["messages"][0]["role"] == "system"
        assert call["messages"][1]["content"].endswith("resume text")

    def test_input_is_truncated(self):
        client = FakeLLMClient(LLM_PAYLOAD)
        extract_with_llm("x" * 5000, client=client, max_chars=1000)

        user_message = client.calls[0]["messages"][1]["content"]
        assert user_message.endswith("x" * 1000)
        assert "x" * 1001 not in user_message


class TestCoercion:
    """Untyped payload validation"""

    def test_entry_kept_when_one_required_key_present(self):
        entries = coerce_entries([{"company": "Acme"}], ExperienceEntry)
        assert entries[0].company == "Acme"
        assert entries[0].position == ""

    def test_non_list_group(self):
        assert coerce_entries({"company": "Acme"}, ExperienceEntry) == []
        assert coerce_entries(None, EducationEntry) == []

    def test_wrong_types_become_empty(self):
        entries = coerce_entries(
            [{"institution": "MIT", "degree": ["B.S."], "honors": "Dean's List", "gpa": None}],
            EducationEntry,
        )
        assert entries[0].degree == ""
        assert entries[0].honors == ["Dean's List"]
        assert entries[0].gpa is None

    def test_snake_case_keys_accepted(self):
        entries = coerce_entries([{"institution": "MIT", "field_of_study": "Physics"}], EducationEntry)
        assert entries[0].field_of_study == "Physics"

    def test_skill_categories_are_verbatim(self):
        assert coerce_skills({"Cloud & DevOps": ["AWS"], "Languages": "Python"}) == {"Cloud & DevOps": ["AWS"]}
        assert coerce_skills(["Python"]) == {}

    def test_whole_payload_with_missing_groups(self):
        result = coerce_llm_payload({"summary": {"text": "nested"}})
        assert result.summary == ""
        assert result.experience == []
        assert result.contact.is_empty()


class TestLLMClient:
    """Client configuration and reply parsing"""

    def test_unconfigured_chat_returns_error_payload(self, unconfigured_client):
        resp = unconfigured_client.chat_json([{"role": "user", "content": "hi"}])
        assert isinstance(resp, _JSONResponse)
        assert resp.error

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            LLMClient(provider="acme")

    def test_coerce_json_strips_fences(self):
        assert LLMClient._coerce_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_coerce_json_finds_object_in_commentary(self):
        assert LLMClient._coerce_json('Here you go: {"a": "}"} thanks') == {"a": "}"}

    def test_coerce_json_unwraps_single_item_list(self):
        assert LLMClient._coerce_json('[{"a": 1}]') == {"a": 1}

    def test_coerce_json_rejects_non_objects(self):
        with pytest.raises(json.JSONDecodeError):
            LLMClient._coerce_json("no json here")

    def test_parse_reply_empty(self, unconfigured_client):
        assert unconfigured_client._parse_reply("").error == "empty response"
