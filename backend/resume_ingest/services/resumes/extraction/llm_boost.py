# resume_ingest/services/resumes/extraction/llm_boost.py
"""
LLM Resume Extractor - asks the configured model to fill the resume schema and
validates the reply group by group before anyone else sees it.
"""
# -----------------------------------------------------------------------------
# PURPOSE
# - One schema-constrained chat call per document (no retry).
# - Missing credential, transport error, malformed JSON: return None and log.
#   The pattern engine covers the request on its own.
# - The reply is untyped input. Every group is coerced separately, so a bad
#   "projects" array cannot take the "experience" array down with it.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import typing
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from resume_ingest.core.config import settings
from resume_ingest.schemas.resume import (
    CertificationEntry,
    ContactRecord,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    ProjectEntry,
    SkillsMap,
)
from resume_ingest.services.common.llm_client import LLMClient, get_llm_client, load_prompt
from resume_ingest.services.resumes.extraction.sections import dedupe_preserve_order

logger = logging.getLogger("resumes.llm")

RESUME_EXTRACTION_PROMPT = load_prompt("resumes/resume_extraction.prompt.txt")

M = TypeVar("M", bound=BaseModel)

_STR = {"type": "string"}
_STR_LIST = {"type": "array", "items": _STR}
_DATE = {"type": "string", "description": "YYYY-MM when the month is known, 'Present' for ongoing"}

# Non-strict: optional fields may be omitted by the model.
RESUME_PARSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "contact": {
            "type": "object",
            "properties": {
                "firstName": _STR, "middleName": _STR, "lastName": _STR, "email": _STR,
                "phone": _STR, "location": _STR, "linkedin": _STR, "github": _STR, "website": _STR,
            },
        },
        "summary": _STR,
        "experience": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "company": _STR, "position": _STR, "location": _STR,
                    "startDate": _DATE, "endDate": _DATE, "current": {"type": "boolean"},
                    "description": _STR, "achievements": _STR_LIST,
                },
                "required": ["company", "position"],
            },
        },
        "education": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "institution": _STR, "degree": _STR, "fieldOfStudy": _STR, "location": _STR,
                    "startDate": _DATE, "endDate": _DATE, "gpa": _STR, "honors": _STR_LIST,
                },
                "required": ["institution", "degree"],
            },
        },
        "projects": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": _STR, "description": _STR, "startDate": _DATE, "endDate": _DATE,
                    "current": {"type": "boolean"}, "achievements": _STR_LIST,
                    "technologies": _STR_LIST, "url": _STR,
                },
                "required": ["name"],
            },
        },
        "certifications": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": _STR, "issuer": _STR, "date": _DATE, "expiryDate": _DATE, "url": _STR,
                },
                "required": ["name"],
            },
        },
        "skills": {
            "type": "object",
            "description": "Category name exactly as written in the resume -> list of skills",
            "additionalProperties": _STR_LIST,
        },
    },
    "required": ["contact", "experience", "education", "skills"],
}

# entry model -> keys of which at least one must be non-empty
_REQUIRED_KEYS: Dict[Type[BaseModel], Sequence[str]] = {
    ExperienceEntry: ("company", "position"),
    EducationEntry: ("institution", "degree"),
    ProjectEntry: ("name",),
    CertificationEntry: ("name",),
}


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def _str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return ""
    return str(value).strip()


def _str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if not isinstance(value, list):
        return []
    return [s for s in (_str(v) for v in value) if s]


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return False


def _coerce_fields(raw: Dict[str, Any], model: Type[M]) -> Dict[str, Any]:
    """Pick each model field from raw (camelCase or snake_case) and coerce it to the field's type."""
    out: Dict[str, Any] = {}
    for name, info in model.model_fields.items():
        if name == "id":
            continue
        key = info.alias if info.alias and info.alias in raw else name
        if key not in raw:
            continue
        value = raw[key]
        ann = info.annotation
        optional = type(None) in typing.get_args(ann)
        if ann is bool:
            out[name] = _bool(value)
        elif typing.get_origin(ann) in (list, List):
            out[name] = _str_list(value)
        elif optional:
            out[name] = _str(value) or None
        else:
            out[name] = _str(value)
    return out


def coerce_contact(raw: Any) -> ContactRecord:
    if not isinstance(raw, dict):
        return ContactRecord()
    return ContactRecord(**_coerce_fields(raw, ContactRecord))


def coerce_entries(raw: Any, model: Type[M], *, log: logging.Logger = logger) -> List[M]:
    if not isinstance(raw, list):
        if raw is not None:
            log.debug("Expected a list for %s, got %s", model.__name__, type(raw).__name__)
        return []
    required = _REQUIRED_KEYS.get(model, ())
    entries: List[M] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            log.debug("Dropping non-object %s #%d", model.__name__, idx)
            continue
        fields = _coerce_fields(item, model)
        if required and not any(fields.get(k) for k in required):
            log.info("Dropping %s #%d: none of %s present", model.__name__, idx, "/".join(required))
            continue
        try:
            entries.append(model(**fields))
        except ValidationError as e:
            log.info("Dropping %s #%d: %s", model.__name__, idx, e)
    return entries


def coerce_skills(raw: Any) -> SkillsMap:
    if not isinstance(raw, dict):
        return {}
    skills: SkillsMap = {}
    for category, values in raw.items():
        if not isinstance(values, list):
            continue
        items = dedupe_preserve_order(_str_list(values))
        name = str(category).strip()
        if name and items:
            skills[name] = items
    return skills


def coerce_llm_payload(data: Dict[str, Any], *, log: logging.Logger = logger) -> ExtractionResult:
    """Validate an untyped model reply into an ExtractionResult, one group at a time."""
    return ExtractionResult(
        contact=coerce_contact(data.get("contact")),
        summary=_str(data.get("summary")),
        experience=coerce_entries(data.get("experience"), ExperienceEntry, log=log),
        education=coerce_entries(data.get("education"), EducationEntry, log=log),
        projects=coerce_entries(data.get("projects"), ProjectEntry, log=log),
        certifications=coerce_entries(data.get("certifications"), CertificationEntry, log=log),
        skills=coerce_skills(data.get("skills")),
    )


# ---------------------------------------------------------------------------
# Extraction entrypoint
# ---------------------------------------------------------------------------

def extract_with_llm(
    formatted_text: str,
    *,
    client: Optional[LLMClient] = None,
    max_chars: Optional[int] = None,
    timeout: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> Optional[ExtractionResult]:
    """
    Structured extraction through the language model.
    Returns None when the extractor is disabled, unconfigured, or the call fails.
    """
    log = log or logger
    if not settings.USE_LLM_EXTRACTION:
        log.info("LLM extraction disabled by USE_LLM_EXTRACTION")
        return None

    client = client or get_llm_client()
    if not client.is_configured:
        log.info("No %s credential configured; skipping LLM extraction", client.provider)
        return None

    limit = max_chars or settings.LLM_MAX_INPUT_CHARS
    text = (formatted_text or "")[:limit]
    if len(formatted_text or "") > limit:
        log.info("Resume text truncated for LLM: %d -> %d chars", len(formatted_text), limit)

    messages = [
        {"role": "system", "content": RESUME_EXTRACTION_PROMPT},
        {"role": "user", "content": f"Resume text:\n\n{text}"},
    ]
    resp = client.chat_json(
        messages,
        timeout=timeout or settings.LLM_TIMEOUT_S,
        json_schema=RESUME_PARSE_SCHEMA,
        schema_name="resume_profile",
    )
    if resp.error:
        log.warning("LLM extraction failed, falling back to pattern extraction: %s", resp.error)
        return None

    try:
        result = coerce_llm_payload(resp.data, log=log)
    except Exception:
        log.exception("LLM payload could not be coerced; ignoring it")
        return None

    log.info(
        "LLM extraction: experience=%d education=%d projects=%d skills categories=%d",
        len(result.experience), len(result.education), len(result.projects), len(result.skills),
    )
    return result
