from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from urllib.parse import urlencode

from app.application.exceptions import PaymentConfigurationError

PAYMENT_RESULT_PATH = "/client/payment-result"
MOYASAR_METHODS = ["creditcard", "stcpay", "applepay"]
APPLE_PAY_LABEL = "Jadwa Platform"
APPLE_PAY_VALIDATE_MERCHANT_URL = "https://api.moyasar.com/v1/apple-pay/initiate"


def build_callback_url(public_base_url: str, attempt_id: str | None) -> str:
    """URL the gateway redirects back to; it appends status, id and message."""
    url = f"{public_base_url.rstrip('/')}{PAYMENT_RESULT_PATH}"
    if attempt_id:
        url += "?" + urlencode({"attempt": attempt_id})
    return url


def to_halalas(amount: float | Decimal) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_form_config(
    amount: float,
    description: str,
    publishable_key: str | None,
    public_base_url: str,
    attempt_id: str | None = None,
    currency: str = "SAR",
) -> dict[str, Any]:
    """Options for initializing the Moyasar payment form for one booking attempt."""
    if not publishable_key:
        raise PaymentConfigurationError("MOYASAR_PUBLISHABLE_KEY is required to take payments")
    if amount <= 0:
        raise ValueError("Payment amount must be positive")

    return {
        "amount": to_halalas(amount),
        "currency": currency,
        "description": description,
        "publishable_api_key": publishable_key,
        "callback_url": build_callback_url(public_base_url, attempt_id),
        "methods": list(MOYASAR_METHODS),
        "country": "SA",
        "apple_pay": {
            "label": APPLE_PAY_LABEL,
            "validate_merchant_url": APPLE_PAY_VALIDATE_MERCHANT_URL,
            "country": "SA",
        },
    }
