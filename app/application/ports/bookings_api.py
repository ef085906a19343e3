from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities.booking_request import BookingRequest


class BookingsApiPort(ABC):
    @abstractmethod
    def create_booking(self, request: BookingRequest) -> dict[str, Any]:
        """Create a booking on the backend. Returns the created booking."""
        raise NotImplementedError
