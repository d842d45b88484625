# resume_ingest/services/resumes/extraction/deterministic.py
"""Rule-based resume extraction that never needs a model: summary, education, projects, certifications, skills."""
# -----------------------------------------------------------------------------
# PURPOSE
# - Deterministic fallback for every field group the LLM extractor fills.
# - Each extractor reads its keywords from vocabulary.py and returns an empty
#   value when nothing matches; extract_pattern_profile() never raises.
# - Dates are returned as written ("Jan 2020", "Present"); the merge step
#   canonicalizes them.
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import re
from typing import Callable, Dict, List, Optional, TypeVar

from resume_ingest.core.config import settings
from resume_ingest.schemas.resume import (
    CertificationEntry,
    ContactRecord,
    EducationEntry,
    ExtractionResult,
    ProjectEntry,
    SkillsMap,
)
from resume_ingest.services.resumes.dates import PRESENT, is_present
from resume_ingest.services.resumes.extraction.contact import (
    CITY_STATE_RE,
    PHONE_PATTERNS,
    URL_RE,
    extract_contact,
)
from resume_ingest.services.resumes.extraction.experience import extract_experience
from resume_ingest.services.resumes.extraction.sections import (
    DATE_RANGE_RE,
    DATE_TOKEN_RE,
    YEAR_OR_PRESENT_RE,
    dedupe_preserve_order,
    find_section,
    inline_heading_content,
    is_bullet,
    split_lines,
    strip_bullet,
)
from resume_ingest.services.resumes.extraction.vocabulary import (
    DEGREE_ABBREVIATIONS,
    DEGREE_KEYWORDS,
    PLACEHOLDER_EDUCATION,
    SCHOOL_KEYWORDS,
    SECTION_HEADINGS,
    SKILL_VOCABULARIES,
    US_STATE_CODES,
)

logger = logging.getLogger("resumes.pattern")

T = TypeVar("T")

SUMMARY_MIN_CHARS = 30
TITLE_MAX_CHARS = 60
TITLE_MAX_WORDS = 8

GPA_RE = re.compile(
    r"\bGPA\b\s*[:\-]?\s*(?P<a>[0-4]\.\d{1,2})(?:\s*/\s*[0-4]\.\d{1,2})?"
    r"|(?P<b>[0-4]\.\d{1,2})(?:\s*/\s*[0-4]\.\d{1,2})?\s*GPA\b",
    re.I,
)
DEGREE_KEYWORD_RE = re.compile(
    r"(?<!\w)(?:" + "|".join(re.escape(k) for k in sorted(DEGREE_KEYWORDS, key=len, reverse=True)) + r")(?!\w)",
    re.I,
)
DEGREE_ABBREV_RE = re.compile(
    r"(?<![\w.])(?:" + "|".join(re.escape(k) for k in sorted(DEGREE_ABBREVIATIONS, key=len, reverse=True)) + r")(?![\w])"
)
SCHOOL_RE = re.compile(r"\b(?:" + "|".join(SCHOOL_KEYWORDS) + r")\b", re.I)
HONORS_RE = re.compile(r"^(?:honors?|awards?)\s*:|cum laude|dean'?s list", re.I)
TECH_LINE_RE = re.compile(r"^(?:technologies|tech stack|stack|built with|tools)\s*:\s*(?P<rest>.+)$", re.I)
_PART_SPLIT_RE = re.compile(r"\s+[|–—-]\s+|\s*[|;]\s*|,\s+")
_EDGE_PUNCT = " \t|,;:-–—()"


def _safe(label: str, fn: Callable[[], T], default: T, log: logging.Logger) -> T:
    try:
        return fn()
    except Exception:
        log.exception("Pattern extractor %s failed; using empty result", label)
        return default


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def _looks_like_phone(text: str) -> bool:
    if any(p.search(text) for p in PHONE_PATTERNS):
        return True
    digits = sum(ch.isdigit() for ch in text)
    return digits >= 7 and digits > len(text) * 0.4


def extract_summary(text: str) -> str:
    lines = split_lines(text)
    block = find_section(lines, "summary")
    summary = " ".join(block).strip() if block else ""
    if not summary:
        summary = inline_heading_content(lines, SECTION_HEADINGS["summary"]) or ""
    if len(summary) < SUMMARY_MIN_CHARS or _looks_like_phone(summary):
        return ""
    return summary


# ---------------------------------------------------------------------------
# Education
# ---------------------------------------------------------------------------

def _find_degree(text: str) -> Optional[re.Match]:
    # "Boston, MA" must not read as a Master of Arts
    masked = CITY_STATE_RE.sub(lambda m: " " * len(m.group(0)) if m.group(2) in US_STATE_CODES else m.group(0), text)
    return DEGREE_KEYWORD_RE.search(masked) or DEGREE_ABBREV_RE.search(masked)


def _split_degree(part: str, match: re.Match) -> tuple[str, str]:
    """'Bachelor of Science in Computer Science' -> ('Bachelor of Science', 'Computer Science')."""
    m = re.search(r"\s+in\s+", part, re.I)
    if m:
        return part[: m.start()].strip(_EDGE_PUNCT), part[m.end():].strip(_EDGE_PUNCT)
    if match.start() == 0 and match.group(0) in DEGREE_ABBREVIATIONS:
        return match.group(0), part[match.end():].strip(_EDGE_PUNCT)
    return part.strip(_EDGE_PUNCT), ""


def _pull_dates(line: str) -> tuple[str, str, str]:
    """Split a line into (rest, start, end); a lone date token counts as the end date."""
    m = DATE_RANGE_RE.search(line)
    if m:
        end = m.group("end").strip()
        rest = (line[: m.start()] + " " + line[m.end():]).strip(_EDGE_PUNCT)
        return rest, m.group("start").strip(), PRESENT if is_present(end) else end
    tokens = list(DATE_TOKEN_RE.finditer(line))
    if tokens:
        last = tokens[-1]
        rest = (line[: last.start()] + " " + line[last.end():]).strip(_EDGE_PUNCT)
        return rest, "", last.group(0).strip()
    return line, "", ""


def _pull_location(line: str) -> tuple[str, str]:
    """Split a line into (rest, "City, ST"). Words up to a school keyword stay in rest."""
    for m in CITY_STATE_RE.finditer(line):
        if m.group(2) not in US_STATE_CODES:
            continue
        city = m.group(1)
        schools = list(SCHOOL_RE.finditer(city))
        if schools:
            city = city[schools[-1].end():].strip()
            if not city:
                continue
        start = m.end(1) - len(city)
        rest = (line[:start] + " " + line[m.end():]).strip(_EDGE_PUNCT)
        return rest, f"{city}, {m.group(2)}"
    return line, ""


def parse_education_block(lines: List[str]) -> List[EducationEntry]:
    entries: List[EducationEntry] = []
    current: Optional[EducationEntry] = None

    def flush() -> None:
        nonlocal current
        if current is not None and (current.institution or current.degree):
            entries.append(current)
        current = None

    for raw in lines:
        line = strip_bullet(raw) if is_bullet(raw) else raw

        if HONORS_RE.search(line):
            if current is not None:
                current.honors.append(re.sub(r"^(?:honors?|awards?)\s*:\s*", "", line, flags=re.I))
            continue

        gpa_value = None
        gpa = GPA_RE.search(line)
        if gpa:
            gpa_value = gpa.group("a") or gpa.group("b")
            line = (line[: gpa.start()] + " " + line[gpa.end():]).strip(_EDGE_PUNCT)

        line, location = _pull_location(line)
        line, start_date, end_date = _pull_dates(line)

        parts = [p.strip(_EDGE_PUNCT) for p in _PART_SPLIT_RE.split(line) if p.strip(_EDGE_PUNCT)]
        degree_part = next(((p, m) for p in parts for m in [_find_degree(p)] if m), None)
        school_part = next((p for p in parts if SCHOOL_RE.search(p)), None)

        if degree_part is not None:
            if current is None or current.degree:
                flush()
                current = EducationEntry()
            part, match = degree_part
            current.degree, field_of_study = _split_degree(part, match)
            if field_of_study and not current.field_of_study:
                current.field_of_study = field_of_study
        if school_part is not None:
            if current is None or (current.institution and degree_part is None):
                flush()
                current = EducationEntry()
            if not current.institution:
                current.institution = school_part

        if current is None:
            continue
        if gpa_value:
            current.gpa = gpa_value
        if location and not current.location:
            current.location = location
        if start_date and not current.start_date:
            current.start_date = start_date
        if end_date and not current.end_date:
            current.end_date = end_date

    flush()
    return entries


def extract_education(text: str, *, placeholder: Optional[bool] = None) -> List[EducationEntry]:
    block = find_section(split_lines(text), "education") or []
    entries = parse_education_block(block)
    use_placeholder = settings.EDUCATION_PLACEHOLDER if placeholder is None else placeholder
    if not entries and use_placeholder:
        logger.info("No education entries found; emitting placeholder entry")
        entries = [EducationEntry(**PLACEHOLDER_EDUCATION)]
    return entries


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

def _is_project_title(line: str) -> bool:
    if line.rstrip().endswith(".") or line[:1].islower():
        return False
    if YEAR_OR_PRESENT_RE.search(line):
        return True
    return len(line) <= TITLE_MAX_CHARS and len(line.split()) <= TITLE_MAX_WORDS


def _start_project(line: str) -> ProjectEntry:
    project = ProjectEntry()
    url = URL_RE.search(line)
    if url:
        project.url = url.group(0).rstrip(".;")
        line = (line[: url.start()] + " " + line[url.end():]).strip(_EDGE_PUNCT)
    m = DATE_RANGE_RE.search(line)
    if m:
        project.start_date = m.group("start").strip()
        end = m.group("end").strip()
        project.current = is_present(end)
        project.end_date = PRESENT if project.current else end
        line = (line[: m.start()] + " " + line[m.end():]).strip(_EDGE_PUNCT)
    else:
        token = DATE_TOKEN_RE.search(line)
        if token:
            project.end_date = token.group(0).strip()
            line = (line[: token.start()] + " " + line[token.end():]).strip(_EDGE_PUNCT)
    parts = [p.strip(_EDGE_PUNCT) for p in re.split(r"\s+[|–—-]\s+|\s*\|\s*", line) if p.strip(_EDGE_PUNCT)]
    project.name = parts[0] if parts else line
    return project


def parse_projects_block(lines: List[str]) -> List[ProjectEntry]:
    projects: List[ProjectEntry] = []
    current: Optional[ProjectEntry] = None
    description: List[str] = []
    last_was_bullet = False

    def flush() -> None:
        if current is not None and current.name:
            current.description = " ".join(description)
            projects.append(current)

    for line in lines:
        if is_bullet(line):
            item = strip_bullet(line)
            if current is not None and item:
                tech = TECH_LINE_RE.match(item)
                if tech:
                    current.technologies.extend(_split_list(tech.group("rest")))
                else:
                    current.achievements.append(item)
                    last_was_bullet = True
            continue

        if last_was_bullet and current is not None and current.achievements and line[:1].islower():
            current.achievements[-1] = f"{current.achievements[-1]} {line}"
            continue
        last_was_bullet = False

        tech = TECH_LINE_RE.match(line)
        if tech and current is not None:
            current.technologies.extend(_split_list(tech.group("rest")))
            continue

        url = URL_RE.fullmatch(line.strip())
        if url and current is not None:
            current.url = line.strip()
            continue

        if _is_project_title(line):
            flush()
            current = _start_project(line)
            description = []
        elif current is not None:
            description.append(line)

    flush()
    for project in projects:
        project.technologies = dedupe_preserve_order(project.technologies)
    return projects


def _split_list(text: str) -> List[str]:
    return [p.strip(_EDGE_PUNCT) for p in re.split(r"[,;|/]", text) if p.strip(_EDGE_PUNCT)]


def extract_projects(text: str) -> List[ProjectEntry]:
    block = find_section(split_lines(text), "projects") or []
    return parse_projects_block(block)


# ---------------------------------------------------------------------------
# Certifications
# ---------------------------------------------------------------------------

def extract_certifications(text: str) -> List[CertificationEntry]:
    block = find_section(split_lines(text), "certifications") or []
    certs: List[CertificationEntry] = []
    for raw in block:
        line = strip_bullet(raw) if is_bullet(raw) else raw
        date = ""
        tokens = list(DATE_TOKEN_RE.finditer(line))
        if tokens:
            last = tokens[-1]
            date = last.group(0).strip()
            line = line[: last.start()] + " " + line[last.end():]
        name = re.sub(r"\(\s*\)", "", line).strip(_EDGE_PUNCT)
        name = re.sub(r"\s{2,}", " ", name)
        if name:
            # issuer is not recoverable from a single line without guessing
            certs.append(CertificationEntry(name=name, issuer="", date=date))
    return certs


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

def _skill_pattern(skill: str) -> re.Pattern:
    head = r"(?<!\w)" if re.match(r"\w", skill) else ""
    tail = r"(?!\w)" if re.search(r"\w$", skill) else ""
    # short tokens ("Go", "R") and acronyms ("SQL", "REST") only count in their written case
    flags = 0 if len(skill) <= 2 or skill.isupper() else re.I
    return re.compile(head + re.escape(skill) + tail, flags)


_SKILL_PATTERNS: Dict[str, List[tuple[str, re.Pattern]]] = {
    category: [(skill, _skill_pattern(skill)) for skill in vocab]
    for category, vocab in SKILL_VOCABULARIES.items()
}


def extract_skills(text: str) -> SkillsMap:
    """Vocabulary hits per fixed category; every category key is always present."""
    found: SkillsMap = {}
    for category, patterns in _SKILL_PATTERNS.items():
        hits = [skill for skill, pattern in patterns if pattern.search(text or "")]
        found[category] = dedupe_preserve_order(hits)
    return found


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

def extract_pattern_profile(
    text: str,
    *,
    education_placeholder: Optional[bool] = None,
    log: Optional[logging.Logger] = None,
) -> ExtractionResult:
    """Run every deterministic extractor; a failing extractor contributes its empty value."""
    log = log or logger
    text = text or ""
    result = ExtractionResult(
        contact=_safe("contact", lambda: extract_contact(text), ContactRecord(), log),
        summary=_safe("summary", lambda: extract_summary(text), "", log),
        experience=_safe("experience", lambda: extract_experience(text), [], log),
        education=_safe(
            "education",
            lambda: extract_education(text, placeholder=education_placeholder),
            [],
            log,
        ),
        projects=_safe("projects", lambda: extract_projects(text), [], log),
        certifications=_safe("certifications", lambda: extract_certifications(text), [], log),
        skills=_safe("skills", lambda: extract_skills(text), {k: [] for k in SKILL_VOCABULARIES}, log),
    )
    log.info(
        "Pattern extraction: experience=%d education=%d projects=%d certifications=%d skills=%d",
        len(result.experience),
        len(result.education),
        len(result.projects),
        len(result.certifications),
        sum(len(v) for v in result.skills.values()),
    )
    return result
