from dataclasses import dataclass


@dataclass(frozen=True)
class PaymentReturn:
    """Query parameters the gateway appends to the callback URL."""

    status: str | None = None
    payment_id: str | None = None
    message: str | None = None
    attempt_id: str | None = None
