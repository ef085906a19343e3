from __future__ import annotations

import logging
from typing import Any

import httpx

from app.application.exceptions import (
    BookingApiError,
    BookingApiTimeoutError,
    BookingApiUnavailableError,
)
from app.application.ports.bookings_api import BookingsApiPort
from app.core.config import settings
from app.domain.entities.booking_request import BookingRequest


class JadwaBookingsClient(BookingsApiPort):
    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.JADWA_API_URL).rstrip("/")
        self._access_token = access_token if access_token is not None else settings.JADWA_API_TOKEN
        self._timeout = timeout if timeout is not None else settings.JADWA_API_TIMEOUT_SECONDS
        self._client = httpx.Client(base_url=self._base_url, timeout=self._timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    def create_booking(self, request: BookingRequest) -> dict[str, Any]:
        try:
            resp = self._client.post("/bookings", json=request.to_payload(), headers=self._headers())
        except httpx.TimeoutException as e:
            self._logger.error(
                "Booking creation timed out",
                extra={"transaction_id": request.transaction_id, "reason": f"timeout={self._timeout}s"},
            )
            raise BookingApiTimeoutError("Booking service did not respond in time") from e
        except httpx.TransportError as e:
            self._logger.error(
                "Booking backend unreachable",
                extra={"transaction_id": request.transaction_id, "error": str(e)},
            )
            raise BookingApiUnavailableError("Cannot connect to backend server") from e

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {"error": "Network error"}
            error_message = body.get("error") if isinstance(body, dict) else None
            if not error_message and resp.status_code == 401:
                error_message = "Unauthorized. Please login again."
            elif not error_message:
                error_message = f"HTTP error! status: {resp.status_code}"

            self._logger.error(
                "Booking creation rejected",
                extra={
                    "status": resp.status_code,
                    "error": error_message,
                    "transaction_id": request.transaction_id,
                },
            )
            raise BookingApiError(str(error_message), status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if isinstance(data, dict) and isinstance(data.get("booking"), dict):
            return data["booking"]
        return data if isinstance(data, dict) else {}
