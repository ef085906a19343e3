from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RecoveryStatus(str, Enum):
    processing = "processing"
    success = "success"
    error = "error"


@dataclass(frozen=True)
class RecoveryOutcome:
    status: RecoveryStatus
    message: str | None = None
    warning: str | None = None
    booking: dict[str, Any] | None = None
    redirect_to: str | None = None
    redirect_after_ms: int | None = None
