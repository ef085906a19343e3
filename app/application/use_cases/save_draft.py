from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from zoneinfo import ZoneInfo

from app.application.exceptions import DraftStorageError
from app.application.ports.draft_store import DraftStorePort
from app.application.utils.draft_keys import draft_key, new_attempt_id
from app.application.utils.instants import parse_instant
from app.domain.entities.booking_draft import BookingDraft, ConsultantSnapshot, ServiceSnapshot

FAIL_OPEN = "fail_open"
FAIL_CLOSED = "fail_closed"


@dataclass(frozen=True)
class DraftSaveResult:
    saved: bool
    attempt_id: str | None = None


class SaveDraftUseCase:
    def __init__(
        self,
        store: DraftStorePort,
        timezone: ZoneInfo,
        scope_per_attempt: bool = True,
        failure_policy: str = FAIL_OPEN,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if failure_policy not in (FAIL_OPEN, FAIL_CLOSED):
            raise ValueError(f"Unknown draft write failure policy: {failure_policy!r}")
        self._store = store
        self._timezone = timezone
        self._scope_per_attempt = scope_per_attempt
        self._failure_policy = failure_policy
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        values: Mapping[str, Any],
        consultant: ConsultantSnapshot | None,
        service: ServiceSnapshot | None = None,
        attempt_id: str | None = None,
    ) -> DraftSaveResult:
        """
        Persist the in-progress booking so it survives the gateway redirect.
        Called on every wizard step; nothing is written until a consultant,
        a date and a time are all present.
        """
        if consultant is None:
            return DraftSaveResult(saved=False, attempt_id=attempt_id)

        try:
            date_value = parse_instant(values.get("date"), self._timezone)
            time_value = parse_instant(values.get("time"), self._timezone)
        except ValueError:
            return DraftSaveResult(saved=False, attempt_id=attempt_id)

        if self._scope_per_attempt:
            attempt_id = attempt_id or new_attempt_id()
        else:
            attempt_id = None
        key = draft_key(attempt_id)

        normalized = dict(values)
        normalized["date"] = date_value.isoformat()
        normalized["time"] = time_value.isoformat()
        draft = BookingDraft(
            consultant=consultant,
            values=normalized,
            service=service,
            attempt_id=attempt_id,
            saved_at=self._clock(),
        )

        try:
            self._store.save(key, draft)
        except DraftStorageError as e:
            if self._failure_policy == FAIL_CLOSED:
                self._logger.error("Draft save failed", extra={"attempt_id": attempt_id, "error": str(e)})
                raise
            self._logger.warning(
                "Draft save failed; continuing without recovery data",
                extra={"attempt_id": attempt_id, "error": str(e)},
            )
            return DraftSaveResult(saved=False, attempt_id=attempt_id)

        self._logger.info("Draft saved", extra={"attempt_id": attempt_id})
        return DraftSaveResult(saved=True, attempt_id=attempt_id)
