from __future__ import annotations

import logging
from typing import Any

from app.application.exceptions import BookingApiError
from app.application.ports.bookings_api import BookingsApiPort
from app.domain.entities.booking_request import BookingRequest


class MockBookingsApi(BookingsApiPort):
    def __init__(self, error: str | None = None) -> None:
        self.created: list[dict[str, Any]] = []
        self._error = error
        self._logger = logging.getLogger(__name__)

    def create_booking(self, request: BookingRequest) -> dict[str, Any]:
        if self._error is not None:
            raise BookingApiError(self._error, status_code=400)

        booking = {"id": f"mock_booking_{len(self.created) + 1}", "status": "PENDING", **request.to_payload()}
        self.created.append(booking)
        self._logger.info(
            "Mock booking created",
            extra={"transaction_id": request.transaction_id, "reason": booking["id"]},
        )
        return booking
