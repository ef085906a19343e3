from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from app.application.exceptions import DraftStorageError
from app.application.ports.draft_store import DraftStorePort
from app.domain.entities.booking_draft import BookingDraft
from app.infrastructure.store.draft_serializer import deserialize_draft, serialize_draft


class JsonDraftStore(DraftStorePort):
    def __init__(
        self,
        data_dir: str = "./data/drafts",
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._ttl_seconds = ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        self._clock = clock
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards _locks
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, key: str) -> threading.Lock:
        """Get or create a lock for a draft key."""
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _forget_lock(self, key: str) -> None:
        with self._lock_lock:
            lock = self._locks.get(key)
            if lock is not None and not lock.locked():
                del self._locks[key]

    def _get_file_path(self, key: str) -> Path:
        # ":" separates the attempt id and is not portable in file names
        return self._data_dir / f"{key.replace(':', '__')}.json"

    def _is_expired(self, saved_at: float, now: float) -> bool:
        return self._ttl_seconds is not None and now - saved_at > self._ttl_seconds

    def _purge_expired(self) -> None:
        """Remove draft files older than the TTL, judged by modification time."""
        if self._ttl_seconds is None:
            return
        now = self._clock()
        for file_path in self._data_dir.glob("*.json"):
            try:
                if not self._is_expired(file_path.stat().st_mtime, now):
                    continue
                file_path.unlink(missing_ok=True)
            except OSError as e:
                self._logger.warning("Could not purge expired draft", extra={"reason": file_path.name, "error": str(e)})
                continue
            self._forget_lock(file_path.stem.replace("__", ":"))

    def save(self, key: str, draft: BookingDraft) -> None:
        """Write the draft atomically (temp file + rename)."""
        self._purge_expired()
        file_path = self._get_file_path(key)
        temp_path = file_path.with_suffix(".json.tmp")
        payload = serialize_draft(draft)

        with self._get_lock(key):
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    f.write(payload)
                temp_path.replace(file_path)
            except OSError as e:
                if temp_path.exists():
                    try:
                        temp_path.unlink()
                    except OSError:
                        self._logger.warning("Could not remove temp draft file", extra={"reason": str(temp_path)})
                raise DraftStorageError(f"Could not write booking draft: {e}") from e

    def load(self, key: str) -> BookingDraft | None:
        file_path = self._get_file_path(key)
        with self._get_lock(key):
            if not file_path.exists():
                return None
            try:
                raw = file_path.read_text(encoding="utf-8")
                modified_at = file_path.stat().st_mtime
            except OSError as e:
                raise DraftStorageError(f"Could not read booking draft: {e}") from e
        draft = deserialize_draft(raw)
        saved_at = draft.saved_at if draft.saved_at is not None else modified_at
        if self._is_expired(saved_at, self._clock()):
            self.delete(key)
            return None
        return draft

    def delete(self, key: str) -> None:
        file_path = self._get_file_path(key)
        with self._get_lock(key):
            try:
                file_path.unlink(missing_ok=True)
            except OSError as e:
                raise DraftStorageError(f"Could not delete booking draft: {e}") from e
        self._forget_lock(key)
