from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DRAFT_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class ConsultantSnapshot:
    id: str
    name: str | None = None
    price_per_session: float | None = None
    duration: int | None = None  # minutes


@dataclass(frozen=True)
class ServiceSnapshot:
    id: str
    title: str | None = None


@dataclass(frozen=True)
class BookingDraft:
    consultant: ConsultantSnapshot
    values: dict[str, Any] = field(default_factory=dict)  # date/time held as ISO strings
    service: ServiceSnapshot | None = None
    attempt_id: str | None = None
    saved_at: float | None = None  # unix timestamp
    version: int = DRAFT_SCHEMA_VERSION
