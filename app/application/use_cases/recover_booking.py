from __future__ import annotations

import json
import logging
from zoneinfo import ZoneInfo

from app.application.exceptions import BookingApiError, DraftFormatError, DraftStorageError
from app.application.ports.bookings_api import BookingsApiPort
from app.application.ports.draft_store import DraftStorePort
from app.application.utils.draft_keys import draft_key
from app.application.utils.instants import format_time_slot, merge_date_and_time, parse_instant
from app.domain.entities.booking_draft import BookingDraft
from app.domain.entities.booking_request import BookingRequest
from app.domain.entities.payment_return import PaymentReturn
from app.domain.entities.recovery import RecoveryOutcome, RecoveryStatus

PAYMENT_FAILED_MESSAGE = "Payment failed"
INVALID_RESPONSE_MESSAGE = "Invalid payment response"
INVALID_DRAFT_DATE_MESSAGE = "Invalid date or time format in draft"
UNKNOWN_ERROR_MESSAGE = "Unknown Error"
LOST_DRAFT_WARNING = "Payment successful but booking details lost. Support will contact you."

DEFAULT_BOOKING_TYPE = "CONSULTATION"
DEFAULT_DURATION_MINUTES = 60


def build_booking_request(draft: BookingDraft, payment_id: str, timezone: ZoneInfo) -> BookingRequest:
    """Compose the booking-creation request from a recovered draft. Raises ValueError on bad date/time."""
    values = draft.values
    date_value = parse_instant(values.get("date"), timezone)
    time_value = parse_instant(values.get("time"), timezone)

    consultation_type = values.get("consultationType")
    payment_method = values.get("paymentMethod")
    consultant = draft.consultant

    return BookingRequest(
        consultant_id=consultant.id,
        service_id=draft.service.id if draft.service else None,
        booking_type=str(consultation_type).upper() if consultation_type else DEFAULT_BOOKING_TYPE,
        scheduled_at=merge_date_and_time(date_value, time_value).astimezone(timezone),
        selected_time_slot=format_time_slot(time_value),
        duration=int(consultant.duration or DEFAULT_DURATION_MINUTES),
        price=float(consultant.price_per_session or 0),
        client_notes=values.get("details") or "",
        payment_status="PAID",
        payment_method=payment_method,
        transaction_id=payment_id,
        payment_details=json.dumps(
            {
                "id": payment_id,
                "status": "paid",
                "source": {"type": "creditcard", "method": payment_method},
            }
        ),
    )


class RecoverBookingUseCase:
    def __init__(
        self,
        store: DraftStorePort,
        bookings_api: BookingsApiPort,
        timezone: ZoneInfo,
        redirect_path: str = "/client/bookings",
        success_delay_ms: int = 3500,
        lost_draft_delay_ms: int = 4500,
    ) -> None:
        self._store = store
        self._bookings_api = bookings_api
        self._timezone = timezone
        self._redirect_path = redirect_path
        self._success_delay_ms = success_delay_ms
        self._lost_draft_delay_ms = lost_draft_delay_ms
        self._logger = logging.getLogger(__name__)

    def execute(self, params: PaymentReturn) -> RecoveryOutcome:
        if params.status == "paid" and params.payment_id:
            return self._complete_paid_booking(params)

        if params.status == "failed":
            self._logger.info(
                "Payment failed at gateway",
                extra={"transaction_id": params.payment_id, "reason": params.message},
            )
            return RecoveryOutcome(status=RecoveryStatus.error, message=params.message or PAYMENT_FAILED_MESSAGE)

        self._logger.warning("Unrecognized payment return", extra={"status": params.status})
        return RecoveryOutcome(status=RecoveryStatus.error, message=INVALID_RESPONSE_MESSAGE)

    def _complete_paid_booking(self, params: PaymentReturn) -> RecoveryOutcome:
        payment_id = params.payment_id or ""
        log_extra = {"attempt_id": params.attempt_id, "transaction_id": payment_id}

        try:
            key = draft_key(params.attempt_id)
        except ValueError:
            self._logger.warning("Malformed attempt id on payment return", extra=log_extra)
            return RecoveryOutcome(status=RecoveryStatus.error, message=INVALID_RESPONSE_MESSAGE)

        try:
            draft = self._store.load(key)
        except (DraftFormatError, DraftStorageError) as e:
            self._logger.error("Stored draft unusable", extra={**log_extra, "error": str(e)})
            return self._booking_failed(str(e))

        if draft is None:
            # Funds were captured; losing the local context is not a payment failure.
            self._logger.warning("No draft booking found after successful payment", extra=log_extra)
            return RecoveryOutcome(
                status=RecoveryStatus.success,
                warning=LOST_DRAFT_WARNING,
                redirect_to=self._redirect_path,
                redirect_after_ms=self._lost_draft_delay_ms,
            )

        try:
            request = build_booking_request(draft, payment_id, self._timezone)
        except ValueError as e:
            self._logger.error("Invalid date/time in draft", extra={**log_extra, "error": str(e)})
            return self._booking_failed(INVALID_DRAFT_DATE_MESSAGE)

        try:
            booking = self._bookings_api.create_booking(request)
        except BookingApiError as e:
            self._logger.error("Booking creation failed", extra={**log_extra, "error": str(e)})
            return self._booking_failed(str(e) or UNKNOWN_ERROR_MESSAGE)

        try:
            self._store.delete(key)
        except DraftStorageError as e:
            # The booking exists; a leftover draft must not turn this into a failure.
            self._logger.error("Could not delete recovered draft", extra={**log_extra, "error": str(e)})

        self._logger.info("Booking recovered after payment", extra=log_extra)
        return RecoveryOutcome(
            status=RecoveryStatus.success,
            booking=booking,
            redirect_to=self._redirect_path,
            redirect_after_ms=self._success_delay_ms,
        )

    def _booking_failed(self, reason: str) -> RecoveryOutcome:
        return RecoveryOutcome(status=RecoveryStatus.error, message=f"Failed to create booking: {reason}")
