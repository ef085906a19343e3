from __future__ import annotations

import json
import math
from datetime import date, datetime
from typing import Any, Callable

from app.application.exceptions import DraftFormatError
from app.domain.entities.booking_draft import (
    DRAFT_SCHEMA_VERSION,
    BookingDraft,
    ConsultantSnapshot,
    ServiceSnapshot,
)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _optional_number(data: dict[str, Any], name: str, cast: Callable[[float], Any]) -> Any:
    """Numeric field or None. Numeric strings are converted; anything else is a format error."""
    value = data.get(name)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise DraftFormatError(f"Stored booking draft has invalid {name}: {value!r}")
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            number = math.nan
        if math.isfinite(number):
            return cast(number)
    raise DraftFormatError(f"Stored booking draft has invalid {name}: {value!r}")


def serialize_draft(draft: BookingDraft) -> str:
    """Serialize a draft to its stored string form."""
    consultant = draft.consultant
    data: dict[str, Any] = {
        "version": draft.version,
        "attemptId": draft.attempt_id,
        "savedAt": draft.saved_at,
        "values": draft.values,
        "consultant": {
            "id": consultant.id,
            "name": consultant.name,
            "pricePerSession": consultant.price_per_session,
            "duration": consultant.duration,
        },
        "service": None,
    }
    if draft.service:
        data["service"] = {"id": draft.service.id, "title": draft.service.title}
    return json.dumps(data, default=_json_default, ensure_ascii=False)


def deserialize_draft(raw: str) -> BookingDraft:
    """Parse a stored draft. Raises DraftFormatError for unreadable or unknown-version payloads."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise DraftFormatError(f"Stored booking draft is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DraftFormatError("Stored booking draft is not an object")

    version = data.get("version")
    if version != DRAFT_SCHEMA_VERSION:
        raise DraftFormatError(f"Unsupported booking draft version: {version!r}")

    consultant_data = data.get("consultant")
    if not isinstance(consultant_data, dict) or not consultant_data.get("id"):
        raise DraftFormatError("Stored booking draft has no consultant")

    values = data.get("values") or {}
    if not isinstance(values, dict):
        raise DraftFormatError("Stored booking draft values are not an object")

    service_data = data.get("service")
    service = None
    if isinstance(service_data, dict) and service_data.get("id"):
        service = ServiceSnapshot(id=str(service_data["id"]), title=service_data.get("title"))

    saved_at = data.get("savedAt")
    if saved_at is not None and (isinstance(saved_at, bool) or not isinstance(saved_at, (int, float))):
        raise DraftFormatError(f"Stored booking draft has invalid savedAt: {saved_at!r}")

    return BookingDraft(
        consultant=ConsultantSnapshot(
            id=str(consultant_data["id"]),
            name=consultant_data.get("name"),
            price_per_session=_optional_number(consultant_data, "pricePerSession", float),
            duration=_optional_number(consultant_data, "duration", int),
        ),
        values=values,
        service=service,
        attempt_id=data.get("attemptId"),
        saved_at=saved_at,
        version=version,
    )
