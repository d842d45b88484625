# resume_ingest/services/resumes/extraction/contact.py
"""Contact cascade: email, phone, profile URLs, location and candidate name from raw text."""
from __future__ import annotations

import logging
import re
from typing import Callable, List, NamedTuple, Optional, Sequence

from email_validator import EmailNotValidError, validate_email

from resume_ingest.schemas.resume import ContactRecord
from resume_ingest.services.resumes.extraction.sections import is_section_heading, split_lines
from resume_ingest.services.resumes.extraction.vocabulary import (
    KNOWN_LOCATIONS,
    NAME_TITLE_EXCLUSIONS,
    US_STATE_CODES,
)

logger = logging.getLogger("resumes.pattern")

EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE_PATTERNS = (
    # (512) 555-1234, +1 (512) 555-1234
    re.compile(r"(?<![\d(])(?:\+?1[\s.-]?)?\(\d{3}\)\s*\d{3}[\s.-]?\d{4}(?!\d)"),
    # 512-555-1234, 512.555.1234, +1 512 555 1234
    re.compile(r"(?<![\d+])(?:\+?1[\s.-])?\d{3}[\s.-]\d{3}[\s.-]\d{4}(?!\d)"),
    # international: +44 20 7946 0958, +972-54-123-4567
    re.compile(r"(?<![\d+])\+\d{1,3}(?:[\s.-]?\d{1,4}){2,4}(?!\d)"),
)
URL_RE = re.compile(r"https?://[^\s)\]>,|]+", re.I)
LINKEDIN_RE = re.compile(r"(?:https?://)?(?:[a-z]{2,3}\.)?linkedin\.com/[^\s)\]>,|]+", re.I)
GITHUB_RE = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[^\s)\]>,|]+", re.I)
CITY_STATE_RE = re.compile(r"\b([A-Z][a-zA-Z.]+(?:[ \t][A-Z][a-zA-Z.]+){0,2}),[ \t]*([A-Z]{2})\b")

NAME_SCAN_LINES = 10

_CAPS = r"[A-Z]+(?:['\-][A-Z]+)*"
_TITLE = r"[A-Z][a-z]+(?:['\-]?[A-Z]?[a-z]+)*"
CAPS_WITH_INITIAL_RE = re.compile(rf"^({_CAPS})\s+([A-Z])\.?\s+({_CAPS})$")
CAPS_PAIR_RE = re.compile(rf"^({_CAPS})\s+({_CAPS})$")
TITLE_PAIR_RE = re.compile(rf"^({_TITLE})\s+({_TITLE})$")
TITLE_WITH_INITIAL_RE = re.compile(rf"^({_TITLE})\s+([A-Z])\.?\s+({_TITLE})$")


class NameParts(NamedTuple):
    first: str
    middle: str
    last: str


NameStrategy = Callable[[str], Optional[NameParts]]


# ---------------------------------------------------------------------------
# Field extractors
# ---------------------------------------------------------------------------

def extract_email(text: str) -> str:
    for m in EMAIL_RE.finditer(text or ""):
        candidate = m.group(0).strip(".")
        try:
            validate_email(candidate, check_deliverability=False)
        except EmailNotValidError:
            logger.debug("Rejected email candidate %r", candidate)
            continue
        return candidate
    return ""


def extract_phones(text: str) -> List[str]:
    """All phone numbers in text order of discovery, deduplicated by digit sequence."""
    seen = set()
    phones: List[str] = []
    for pattern in PHONE_PATTERNS:
        for m in pattern.finditer(text or ""):
            value = m.group(0).strip()
            digits = re.sub(r"\D", "", value)
            # "+1 512..." and "512..." are the same number
            key = digits[1:] if len(digits) == 11 and digits.startswith("1") else digits
            if len(digits) < 10 or key in seen:
                continue
            seen.add(key)
            phones.append(value)
    return phones


def _as_https(url: str) -> str:
    url = url.rstrip(".;")
    if re.match(r"^https?://", url, re.I):
        return re.sub(r"^http://", "https://", url, flags=re.I)
    return "https://" + url


def extract_linkedin(text: str) -> str:
    m = LINKEDIN_RE.search(text or "")
    return _as_https(m.group(0)) if m else ""


def extract_github(text: str) -> str:
    m = GITHUB_RE.search(text or "")
    return _as_https(m.group(0)) if m else ""


def extract_website(text: str) -> str:
    for m in URL_RE.finditer(text or ""):
        url = m.group(0).rstrip(".;")
        low = url.lower()
        if "linkedin.com" in low or "github.com" in low:
            continue
        return url
    return ""


def extract_location(text: str) -> str:
    for known in KNOWN_LOCATIONS:
        if re.search(rf"(?<!\w){re.escape(known)}(?!\w)", text or "", re.I):
            return known
    for m in CITY_STATE_RE.finditer(text or ""):
        if m.group(2) in US_STATE_CODES:
            return f"{m.group(1)}, {m.group(2)}"
    return ""


# ---------------------------------------------------------------------------
# Name strategies, tried in order on each candidate line
# ---------------------------------------------------------------------------

def _is_excluded(*tokens: str) -> bool:
    return any(t.upper() in NAME_TITLE_EXCLUSIONS for t in tokens)


def caps_name_with_initial(line: str) -> Optional[NameParts]:
    m = CAPS_WITH_INITIAL_RE.match(line)
    if not m or _is_excluded(m.group(1), m.group(3)):
        return None
    return NameParts(m.group(1).title(), m.group(2) + ".", m.group(3).title())


def caps_name(line: str) -> Optional[NameParts]:
    m = CAPS_PAIR_RE.match(line)
    if not m or len(m.group(1)) < 2 or len(m.group(2)) < 2:
        return None
    if _is_excluded(m.group(1), m.group(2)):
        return None
    return NameParts(m.group(1).title(), "", m.group(2).title())


def title_case_name(line: str) -> Optional[NameParts]:
    if len(line) >= 50:
        return None
    m = TITLE_PAIR_RE.match(line)
    if not m or _is_excluded(m.group(1), m.group(2)):
        return None
    return NameParts(m.group(1), "", m.group(2))


def title_case_name_with_initial(line: str) -> Optional[NameParts]:
    m = TITLE_WITH_INITIAL_RE.match(line)
    if not m or _is_excluded(m.group(1), m.group(3)):
        return None
    return NameParts(m.group(1), m.group(2) + ".", m.group(3))


NAME_STRATEGIES: Sequence[NameStrategy] = (
    caps_name_with_initial,
    caps_name,
    title_case_name,
    title_case_name_with_initial,
)


def _looks_like_contact_line(line: str) -> bool:
    low = line.lower()
    if "@" in line or "http" in low or "www." in low or "linkedin" in low or "github" in low:
        return True
    if any(p.search(line) for p in PHONE_PATTERNS):
        return True
    return is_section_heading(line)


def name_from_email(email: str) -> Optional[NameParts]:
    local = (email or "").split("@", 1)[0]
    parts = [p for p in re.split(r"[._\-]+", local) if p and p.isalpha()]
    if not parts:
        return None
    first = parts[0].capitalize()
    last = parts[-1].capitalize() if len(parts) > 1 else ""
    return NameParts(first, "", last)


def extract_name(
    lines: Sequence[str],
    email: str = "",
    strategies: Sequence[NameStrategy] = NAME_STRATEGIES,
) -> Optional[NameParts]:
    """First strategy hit over the top non-contact lines; the email local part is the last resort."""
    for line in list(lines)[:NAME_SCAN_LINES]:
        if _looks_like_contact_line(line):
            continue
        for strategy in strategies:
            found = strategy(line.strip())
            if found:
                logger.debug("Name found by %s on line %r", strategy.__name__, line)
                return found
    if email:
        return name_from_email(email)
    return None


def extract_contact(text: str) -> ContactRecord:
    email = extract_email(text)
    phones = extract_phones(text)
    name = extract_name(split_lines(text), email=email)
    return ContactRecord(
        first_name=name.first if name else "",
        middle_name=name.middle if name else "",
        last_name=name.last if name else "",
        email=email,
        phone=phones[0] if phones else "",
        location=extract_location(text),
        linkedin=extract_linkedin(text),
        github=extract_github(text),
        website=extract_website(text),
    )
