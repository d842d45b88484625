# resume_ingest/services/resumes/extraction/experience.py
"""
Work-history slicing.

The experience block is cut into one segment per date range. Each segment's
header lines (before the first bullet) name the role, employer and place;
everything after is achievements (bullets) or description (prose).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from resume_ingest.schemas.resume import ExperienceEntry
from resume_ingest.services.resumes.dates import PRESENT, is_present
from resume_ingest.services.resumes.extraction.contact import CITY_STATE_RE, extract_location
from resume_ingest.services.resumes.extraction.sections import (
    DATE_RANGE_RE,
    find_section,
    is_bullet,
    split_lines,
    strip_bullet,
)
from resume_ingest.services.resumes.extraction.vocabulary import (
    JOB_TITLE_KEYWORDS,
    PLACEHOLDER_COMPANY,
    PLACEHOLDER_POSITION,
    US_STATE_CODES,
)

logger = logging.getLogger("resumes.pattern")

HEADER_WINDOW = 5
HEADER_MAX_CHARS = 60
PROSE_MIN_CHARS = 20
MAX_WALK_BACK = 3

_TITLE_KEYWORD_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(k) for k in sorted(JOB_TITLE_KEYWORDS, key=len, reverse=True)) + r")s?\b",
    re.I,
)
# "Senior Engineer at Acme", "Engineer | Acme", "Engineer @ Acme"
_ROLE_AT_COMPANY_RE = re.compile(r"^(?P<a>.+?)\s+(?:at|@|\||–|—|-)\s+(?P<b>.+)$", re.I)
_EDGE_PUNCT = " \t|,;:-–—@()"


@dataclass
class _Header:
    company: str = ""
    position: str = ""
    location: str = ""
    leftovers: List[str] = field(default_factory=list)


def _is_location(text: str) -> bool:
    t = text.strip(_EDGE_PUNCT)
    if t.lower() in {"remote", "hybrid", "on-site", "onsite"}:
        return True
    m = CITY_STATE_RE.fullmatch(t)
    if m and m.group(2) in US_STATE_CODES:
        return True
    return len(t) <= 40 and bool(extract_location(t))


def _is_title(text: str) -> bool:
    return bool(_TITLE_KEYWORD_RE.search(text))


def _classify(header: _Header, text: str) -> None:
    text = text.strip(_EDGE_PUNCT)
    if not text:
        return
    if not header.location and _is_location(text):
        header.location = text
        return

    m = _ROLE_AT_COMPANY_RE.match(text)
    if m and not header.position and not header.company:
        a, b = m.group("a").strip(_EDGE_PUNCT), m.group("b").strip(_EDGE_PUNCT)
        if _is_title(a) and not _is_title(b):
            header.position, header.company = a, b
            return
        if _is_title(b) and not _is_title(a):
            header.company, header.position = a, b
            return

    if not header.position and _is_title(text):
        header.position = text
    elif not header.company and len(text) < HEADER_MAX_CHARS:
        header.company = text
    else:
        header.leftovers.append(text)


def _split_range(match: re.Match) -> Tuple[str, str, bool]:
    start = match.group("start").strip()
    end = match.group("end").strip()
    if is_present(end):
        return start, PRESENT, True
    return start, end, False


def _date_line_indices(lines: Sequence[str]) -> List[int]:
    return [i for i, line in enumerate(lines) if DATE_RANGE_RE.search(line)]


def _is_header_like(line: str) -> bool:
    return (
        not is_bullet(line)
        and len(line) < HEADER_MAX_CHARS
        and not line.rstrip().endswith(".")
        and not DATE_RANGE_RE.search(line)
    )


def _segment_starts(lines: Sequence[str], date_idx: List[int]) -> List[int]:
    """Job #1 starts at the top; later jobs pull up to three header lines above their date."""
    starts = [0]
    for k in range(1, len(date_idx)):
        floor = date_idx[k - 1] + 1
        start = date_idx[k]
        while start - 1 >= floor and date_idx[k] - (start - 1) <= MAX_WALK_BACK and _is_header_like(lines[start - 1]):
            start -= 1
        starts.append(start)
    return starts


def _parse_segment(segment: Sequence[str], date_offset: Optional[int]) -> ExperienceEntry:
    header = _Header()
    start_date, end_date, current = "", "", False

    if date_offset is not None:
        m = DATE_RANGE_RE.search(segment[date_offset])
        if m:
            start_date, end_date, current = _split_range(m)
            leftover = (segment[date_offset][: m.start()] + " " + segment[date_offset][m.end():]).strip(_EDGE_PUNCT)
            if leftover:
                _classify(header, leftover)

    body_start = 0
    seen = 0
    for i, line in enumerate(segment):
        if is_bullet(line) or seen >= HEADER_WINDOW:
            break
        body_start = i + 1
        if i == date_offset:
            continue
        seen += 1
        if len(line) < HEADER_MAX_CHARS:
            _classify(header, line)
        else:
            header.leftovers.append(line)

    achievements: List[str] = []
    prose: List[str] = [t for t in header.leftovers if len(t) > PROSE_MIN_CHARS]
    last_was_bullet = False
    for i, line in enumerate(segment[body_start:], start=body_start):
        if i == date_offset:
            continue
        if is_bullet(line):
            item = strip_bullet(line)
            if item:
                achievements.append(item)
                last_was_bullet = True
            continue
        if last_was_bullet and achievements and line[:1].islower():
            achievements[-1] = f"{achievements[-1]} {line}"
            continue
        last_was_bullet = False
        if len(line) > PROSE_MIN_CHARS:
            prose.append(line)

    return ExperienceEntry(
        company=header.company or PLACEHOLDER_COMPANY,
        position=header.position or PLACEHOLDER_POSITION,
        location=header.location,
        start_date=start_date,
        end_date=end_date,
        current=current,
        description=" ".join(prose),
        achievements=achievements,
    )


def parse_experience_block(lines: Sequence[str]) -> List[ExperienceEntry]:
    lines = [ln for ln in lines if ln.strip()]
    if not lines:
        return []

    date_idx = _date_line_indices(lines)
    if not date_idx:
        # a dateless block still describes one job
        return [_parse_segment(lines, None)]

    starts = _segment_starts(lines, date_idx)
    entries: List[ExperienceEntry] = []
    for k, start in enumerate(starts):
        end = starts[k + 1] if k + 1 < len(starts) else len(lines)
        segment = lines[start:end]
        entries.append(_parse_segment(segment, date_idx[k] - start))
    logger.debug("Experience block split into %d entries", len(entries))
    return entries


def extract_experience(text: str) -> List[ExperienceEntry]:
    block = find_section(split_lines(text), "experience")
    if block is None:
        return []
    return parse_experience_block(block)
