# resume_ingest/services/resumes/extraction/sections.py
"""Line-level helpers shared by the pattern extractors: heading detection, section blocks, bullets."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from resume_ingest.services.resumes.extraction.vocabulary import (
    BULLET_CHARS,
    HEADING_LOOKUP,
    MONTHS,
    SECTION_HEADINGS,
)

# "## EXPERIENCE" markers come from the formatted text variant
_HEADING_MARKER_RE = re.compile(r"^#{1,6}\s*")
_HEADING_TRIM_RE = re.compile(r"[\s:|\-–—_=*#]+$")
_WS_RE = re.compile(r"\s+")
_BULLET_RE = re.compile(r"^\s*(?:[" + re.escape("".join(BULLET_CHARS)) + r"]\s*|\d{1,2}[.)]\s+)")

# ---------------------------------------------------------------------------
# Date-range vocabulary shared by experience, projects and education
# ---------------------------------------------------------------------------
_MONTH_ALT = "|".join(sorted(MONTHS.keys(), key=len, reverse=True))
_YEAR = r"(?:19|20)\d{2}"
DATE_POINT = rf"(?:(?:{_MONTH_ALT})\.?,?\s+{_YEAR}|\d{{1,2}}/{_YEAR}|{_YEAR})"
DATE_RANGE_RE = re.compile(
    rf"\b(?P<start>{DATE_POINT})\s*(?:-|–|—|\bto\b|\buntil\b)\s*(?P<end>{DATE_POINT}|present|current|now)\b",
    re.IGNORECASE,
)
DATE_TOKEN_RE = re.compile(rf"\b(?:{DATE_POINT})\b", re.IGNORECASE)
YEAR_OR_PRESENT_RE = re.compile(r"\b(?:19|20)\d{2}\b|\bpresent\b", re.IGNORECASE)


def clean_line(line: str) -> str:
    return _WS_RE.sub(" ", _HEADING_MARKER_RE.sub("", line or "")).strip()


def split_lines(text: str) -> List[str]:
    """Non-empty, whitespace-collapsed lines."""
    out: List[str] = []
    for raw in (text or "").splitlines():
        line = clean_line(raw)
        if line:
            out.append(line)
    return out


def classify_heading(line: str) -> Optional[str]:
    """
    Return the section key if the line is a section heading.
    Exact dictionary hits win; otherwise a short ALL-CAPS or colon-terminated line
    that starts with a known heading also counts ("TECHNICAL SKILLS & TOOLS:").
    """
    text = clean_line(line)
    if not text or len(text) > 60:
        return None
    key = _HEADING_TRIM_RE.sub("", text).strip().lower()
    if key in HEADING_LOOKUP:
        return HEADING_LOOKUP[key]

    looks_like_heading = (text.isupper() or text.endswith(":")) and len(text.split()) <= 5
    if not looks_like_heading:
        return None
    for section, headings in SECTION_HEADINGS.items():
        for heading in headings:
            # a lone trailing word ("IBM RESEARCH") is an employer line, not a heading
            if key.startswith(heading + " ") or (" " in heading and key.endswith(" " + heading)):
                return section
    return None


def is_section_heading(line: str) -> bool:
    return classify_heading(line) is not None


def find_section(lines: Sequence[str], section: str) -> Optional[List[str]]:
    """
    Lines between the first heading of `section` and the next recognized heading.
    Returns None when the section heading is absent (an empty list means the heading
    exists but the section has no content).
    """
    start = None
    for idx, line in enumerate(lines):
        if classify_heading(line) == section:
            start = idx + 1
            break
    if start is None:
        return None
    block: List[str] = []
    for line in lines[start:]:
        if is_section_heading(line):
            break
        block.append(line)
    return block


def inline_heading_content(lines: Sequence[str], headings: Iterable[str]) -> Optional[str]:
    """Text after 'Summary: ...' style headings sharing a line with their content."""
    for line in lines:
        text = clean_line(line)
        low = text.lower()
        for heading in headings:
            if low.startswith(heading + ":") and len(text) > len(heading) + 1:
                return text[len(heading) + 1:].strip()
    return None


def is_bullet(line: str) -> bool:
    return bool(_BULLET_RE.match(line or ""))


def strip_bullet(line: str) -> str:
    return _BULLET_RE.sub("", line or "", count=1).strip()


def dedupe_preserve_order(items: Iterable[str]) -> List[str]:
    """Deduplicate case-insensitively while preserving order and skipping empty items."""
    seen = set()
    out: List[str] = []
    for it in items:
        key = (it or "").strip()
        if key and key.lower() not in seen:
            seen.add(key.lower())
            out.append(key)
    return out
