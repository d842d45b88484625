# resume_ingest/services/resumes/validation.py
"""Resume validation service: quality checks for completeness and consistency of a merged profile."""
from __future__ import annotations

import re
from typing import Any, Dict, List

from resume_ingest.schemas.resume import EducationEntry, ExperienceEntry, MergedProfile
from resume_ingest.services.resumes.dates import PRESENT
from resume_ingest.services.resumes.extraction.vocabulary import (
    PLACEHOLDER_COMPANY,
    PLACEHOLDER_EDUCATION,
    PLACEHOLDER_POSITION,
)

MIN_SKILLS = 5
SUMMARY_MIN_WORDS = 30
SUMMARY_MAX_WORDS = 200

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
_CANONICAL_RE = re.compile(r"^\d{4}-\d{2}$")


class ValidationResult:
    """Result of a validation check."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.info: List[str] = []
        self.quality_score: float = 1.0

    def add_error(self, message: str):
        self.errors.append(message)
        self.quality_score = max(0.0, self.quality_score - 0.2)

    def add_warning(self, message: str):
        self.warnings.append(message)
        self.quality_score = max(0.0, self.quality_score - 0.1)

    def add_info(self, message: str):
        self.info.append(message)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def summary(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "qualityScore": round(self.quality_score, 2),
            "status": _get_status_label(self.quality_score),
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }


def validate_profile(profile: MergedProfile) -> ValidationResult:
    """
    Validate the quality of a merged resume profile.

    Checks:
    - Contact information present and well-formed
    - Experience entries are real (no placeholders) and dated consistently
    - Education is not the placeholder entry
    - Skills and summary are reasonably sized
    """
    result = ValidationResult()
    _validate_contact(profile, result)
    _validate_experience(profile.experience, result)
    _validate_education(profile.education, result)
    _validate_skills(profile.skills, result)
    _validate_summary(profile.summary, result)
    _check_completeness(profile, result)
    return result


def _validate_contact(profile: MergedProfile, result: ValidationResult):
    contact = profile.contact
    if len(contact.full_name.strip()) < 2:
        result.add_warning("Missing candidate name")
    if not contact.email and not contact.phone:
        result.add_warning("No contact information (email/phone) extracted")
    if contact.email and not _EMAIL_RE.match(contact.email):
        result.add_warning(f"Suspicious email format: {contact.email}")


def _validate_experience(experience: List[ExperienceEntry], result: ValidationResult):
    if not experience:
        result.add_error("No work experience extracted")
        return

    for idx, role in enumerate(experience, start=1):
        label = role.position if role.position != PLACEHOLDER_POSITION else f"entry {idx}"
        if role.company == PLACEHOLDER_COMPANY:
            result.add_warning(f"Experience '{label}': company name not found")
        if role.position == PLACEHOLDER_POSITION:
            result.add_warning(f"Experience entry {idx}: job title not found")
        if not role.start_date:
            result.add_warning(f"Experience '{label}': missing start date")
        if _is_before(role.end_date, role.start_date):
            result.add_error(f"Experience '{label}': end date before start date")
        if not role.achievements and not role.description:
            result.add_info(f"Experience '{label}': no detailed description")


def _is_placeholder_education(entry: EducationEntry) -> bool:
    return (
        entry.institution == PLACEHOLDER_EDUCATION["institution"]
        and entry.degree == PLACEHOLDER_EDUCATION["degree"]
    )


def _validate_education(education: List[EducationEntry], result: ValidationResult):
    if not education:
        result.add_info("No education information extracted")
        return
    for idx, edu in enumerate(education, start=1):
        if _is_placeholder_education(edu):
            result.add_warning("Education entry is a placeholder; no education section was recognized")
            continue
        if _is_before(edu.end_date, edu.start_date):
            result.add_error(f"Education entry {idx}: end date before start date")


def _validate_skills(skills: Dict[str, List[str]], result: ValidationResult):
    names = [s.lower() for values in skills.values() for s in values]
    if not names:
        result.add_warning("No skills extracted")
        return
    if len(set(names)) < MIN_SKILLS:
        result.add_warning(f"Only {len(set(names))} skills extracted - resume might be under-parsed")
    if len(names) != len(set(names)):
        result.add_info("Same skill listed under more than one category")


def _validate_summary(summary: str, result: ValidationResult):
    words = len(summary.split())
    if words == 0:
        result.add_info("No summary extracted")
    elif words < SUMMARY_MIN_WORDS:
        result.add_warning(f"Summary is short ({words} words)")
    elif words > SUMMARY_MAX_WORDS:
        result.add_warning(f"Summary is long ({words} words)")


def _check_completeness(profile: MergedProfile, result: ValidationResult):
    has = [
        not profile.contact.is_empty(),
        bool(profile.experience),
        any(not _is_placeholder_education(e) for e in profile.education),
        any(profile.skills.values()),
    ]
    result.add_info(f"Extraction completeness: {int(sum(has) / len(has) * 100)}%")


def _is_before(end: str, start: str) -> bool:
    """True when both are canonical dates and end precedes start ('Present' is never before)."""
    if end == PRESENT or not (_CANONICAL_RE.match(end or "") and _CANONICAL_RE.match(start or "")):
        return False
    return end < start


def _get_status_label(quality_score: float) -> str:
    """Get human-readable status label for quality score."""
    if quality_score >= 0.9:
        return "excellent"
    elif quality_score >= 0.75:
        return "good"
    elif quality_score >= 0.6:
        return "acceptable"
    elif quality_score >= 0.4:
        return "poor"
    else:
        return "critical"
