from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class BookingRequest:
    consultant_id: str
    service_id: str | None
    booking_type: str
    scheduled_at: datetime
    selected_time_slot: str  # HH:MM
    duration: int
    price: float
    client_notes: str
    payment_status: str
    payment_method: str | None
    transaction_id: str
    payment_details: str  # JSON encoded

    def to_payload(self) -> dict[str, Any]:
        """Body accepted by the backend's booking-creation endpoint."""
        return {
            "consultantId": self.consultant_id,
            "serviceId": self.service_id,
            "bookingType": self.booking_type,
            "scheduledAt": self.scheduled_at.isoformat(),
            "selectedTimeSlot": self.selected_time_slot,
            "duration": self.duration,
            "price": self.price,
            "clientNotes": self.client_notes,
            "paymentStatus": self.payment_status,
            "paymentMethod": self.payment_method,
            "transactionId": self.transaction_id,
            "paymentDetails": self.payment_details,
        }
