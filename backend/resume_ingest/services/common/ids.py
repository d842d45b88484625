# resume_ingest/services/common/ids.py
"""Identifier generation for list entries minted at merge time."""
from __future__ import annotations

import uuid
from typing import Callable

IdFactory = Callable[[], str]


def new_id() -> str:
    """Opaque identifier, unique in practice; not derived from entry content."""
    return str(uuid.uuid4())
