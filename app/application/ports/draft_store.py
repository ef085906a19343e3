from abc import ABC, abstractmethod

from app.domain.entities.booking_draft import BookingDraft


class DraftStorePort(ABC):
    @abstractmethod
    def save(self, key: str, draft: BookingDraft) -> None:
        """Write the draft under `key`, replacing any previous one."""
        raise NotImplementedError

    @abstractmethod
    def load(self, key: str) -> BookingDraft | None:
        """Return the draft stored under `key`, or None if there is none."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError
