from __future__ import annotations

import time
from typing import Callable

from app.application.exceptions import DraftStorageError
from app.application.ports.draft_store import DraftStorePort
from app.domain.entities.booking_draft import BookingDraft
from app.infrastructure.store.draft_serializer import deserialize_draft, serialize_draft


class MemoryDraftStore(DraftStorePort):
    """Process-local draft store. Keeps the serialized form, like a browser key-value store."""

    def __init__(
        self,
        max_items: int | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._items: dict[str, str] = {}
        self._saved_at: dict[str, float] = {}
        self._max_items = max_items
        self._ttl_seconds = ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        self._clock = clock

    def _is_expired(self, key: str, now: float) -> bool:
        if self._ttl_seconds is None:
            return False
        return now - self._saved_at.get(key, now) > self._ttl_seconds

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k in self._items if self._is_expired(k, now)]:
            self.delete(key)

    def save(self, key: str, draft: BookingDraft) -> None:
        self._purge_expired()
        if self._max_items is not None and key not in self._items and len(self._items) >= self._max_items:
            raise DraftStorageError(f"Draft store quota exceeded ({self._max_items} items)")
        self._items[key] = serialize_draft(draft)
        self._saved_at[key] = draft.saved_at if draft.saved_at is not None else self._clock()

    def load(self, key: str) -> BookingDraft | None:
        raw = self._items.get(key)
        if raw is None:
            return None
        if self._is_expired(key, self._clock()):
            self.delete(key)
            return None
        return deserialize_draft(raw)

    def delete(self, key: str) -> None:
        self._items.pop(key, None)
        self._saved_at.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items
