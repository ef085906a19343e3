from __future__ import annotations

import re
import uuid

LEGACY_DRAFT_KEY = "draftBooking"

_ATTEMPT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def new_attempt_id() -> str:
    return uuid.uuid4().hex


def draft_key(attempt_id: str | None) -> str:
    """Storage key for a booking attempt. No attempt id means the shared legacy key."""
    if not attempt_id:
        return LEGACY_DRAFT_KEY
    if not _ATTEMPT_ID_RE.match(attempt_id):
        raise ValueError(f"Invalid booking attempt id: {attempt_id!r}")
    return f"{LEGACY_DRAFT_KEY}:{attempt_id}"
