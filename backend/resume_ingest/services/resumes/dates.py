# resume_ingest/services/resumes/dates.py
"""Date canonicalization: every date field in a merged profile ends up as YYYY-MM or empty."""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

from resume_ingest.services.resumes.extraction.vocabulary import MONTHS, PRESENT_WORDS

logger = logging.getLogger("resumes.dates")

PRESENT = "Present"

_CANONICAL_RE = re.compile(r"^\d{4}-\d{2}$")
_ISO_DAY_RE = re.compile(r"^(\d{4})-(\d{2})-\d{2}$")
_MONTH_YEAR_RE = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")


def normalize_date(value: Any, *, log: Optional[logging.Logger] = None) -> str:
    """
    Convert a loose date string into YYYY-MM.
    Accepts: YYYY-MM (unchanged), 'Nov 2023', 'November, 2023', 'Sept 2021', YYYY-MM-DD.
    Anything else yields "" and a debug line; callers never see an exception.
    """
    log = log or logger
    if value is None:
        return ""
    raw = str(value).strip()
    if not raw:
        return ""

    if _CANONICAL_RE.match(raw):
        return raw

    m = _MONTH_YEAR_RE.match(raw)
    if m:
        month = MONTHS.get(m.group(1).lower())
        if month:
            return f"{m.group(2)}-{month}"

    m = _ISO_DAY_RE.match(raw)
    if m:
        return f"{m.group(1)}-{m.group(2)}"

    log.debug("Unparseable date %r normalized to empty string", raw)
    return ""


def is_present(value: Any) -> bool:
    """True for 'Present' / 'current' / 'now' in any case."""
    return isinstance(value, str) and value.strip().lower() in PRESENT_WORDS
