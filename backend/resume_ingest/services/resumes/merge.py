# resume_ingest/services/resumes/merge.py
"""
Group-level reconciliation of the LLM and pattern extractions.

For each field group the LLM result is taken when it is non-empty, otherwise the
pattern result. Groups are never blended entry by entry. After selection every
list entry gets a fresh id and every date is canonicalized.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from resume_ingest.schemas.resume import (
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    ExtractionResult,
    MergedProfile,
    ProjectEntry,
    SourceType,
)
from resume_ingest.services.common.ids import IdFactory, new_id
from resume_ingest.services.resumes.dates import PRESENT, is_present, normalize_date

logger = logging.getLogger("resumes.merge")

T = TypeVar("T")

SOURCE_AI = "ai"
SOURCE_PATTERN = "pattern"

# group -> emptiness test on the group's value
_NON_EMPTY: Dict[str, Callable[[object], bool]] = {
    "contact": lambda v: not v.is_empty(),
    "summary": lambda v: bool((v or "").strip()),
    "experience": bool,
    "education": bool,
    "skills": lambda v: any(v.values()) if v else False,
    "projects": bool,
    "certifications": bool,
}


def _choose(group: str, ai: Optional[ExtractionResult], pattern: ExtractionResult) -> Tuple[object, str]:
    if ai is not None:
        value = getattr(ai, group)
        if _NON_EMPTY[group](value):
            return value, SOURCE_AI
    return getattr(pattern, group), SOURCE_PATTERN


def _end_and_current(end: str, current: bool, log: logging.Logger) -> Tuple[str, bool]:
    if current or is_present(end):
        return PRESENT, True
    return normalize_date(end, log=log), False


def _experience(entry: ExperienceEntry, new_id_: IdFactory, log: logging.Logger) -> ExperienceEntry:
    end, current = _end_and_current(entry.end_date, entry.current, log)
    return entry.model_copy(
        update={
            "id": new_id_(),
            "start_date": normalize_date(entry.start_date, log=log),
            "end_date": end,
            "current": current,
            "achievements": list(entry.achievements),
        },
        deep=True,
    )


def _education(entry: EducationEntry, new_id_: IdFactory, log: logging.Logger) -> EducationEntry:
    end = PRESENT if is_present(entry.end_date) else normalize_date(entry.end_date, log=log)
    return entry.model_copy(
        update={
            "id": new_id_(),
            "start_date": normalize_date(entry.start_date, log=log),
            "end_date": end,
        },
        deep=True,
    )


def _project(entry: ProjectEntry, new_id_: IdFactory, log: logging.Logger) -> ProjectEntry:
    end, current = _end_and_current(entry.end_date, entry.current, log)
    return entry.model_copy(
        update={
            "id": new_id_(),
            "start_date": normalize_date(entry.start_date, log=log),
            "end_date": end,
            "current": current,
        },
        deep=True,
    )


def _certification(entry: CertificationEntry, new_id_: IdFactory, log: logging.Logger) -> CertificationEntry:
    return entry.model_copy(
        update={
            "id": new_id_(),
            "date": normalize_date(entry.date, log=log),
            "expiry_date": normalize_date(entry.expiry_date, log=log),
        },
        deep=True,
    )


def _each(items: List[T], fn: Callable[[T, IdFactory, logging.Logger], T], new_id_: IdFactory, log: logging.Logger) -> List[T]:
    return [fn(item, new_id_, log) for item in items]


def merge_extractions(
    ai: Optional[ExtractionResult],
    pattern: ExtractionResult,
    *,
    source_type: SourceType,
    id_factory: IdFactory = new_id,
    created_at: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> MergedProfile:
    """
    Combine both extractions into one profile.
    `ai` may be None (extractor unavailable or failed); `pattern` is always present.
    """
    log = log or logger
    chosen: Dict[str, object] = {}
    sources: Dict[str, str] = {}
    for group in _NON_EMPTY:
        chosen[group], sources[group] = _choose(group, ai, pattern)
    log.info("Merge sources: %s", ", ".join(f"{g}={s}" for g, s in sources.items()))

    skills = {category: list(values) for category, values in chosen["skills"].items()}

    return MergedProfile(
        contact=chosen["contact"].model_copy(deep=True),
        summary=(chosen["summary"] or "").strip(),
        experience=_each(chosen["experience"], _experience, id_factory, log),
        education=_each(chosen["education"], _education, id_factory, log),
        projects=_each(chosen["projects"], _project, id_factory, log),
        certifications=_each(chosen["certifications"], _certification, id_factory, log),
        skills=skills,
        created_at=created_at or datetime.now(timezone.utc).isoformat(),
        source_type=source_type,
        sources=sources,
    )
