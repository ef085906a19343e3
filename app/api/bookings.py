from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.schemas import (
    MoyasarFormRequestSchema,
    PaymentResultResponseSchema,
    SaveDraftRequestSchema,
    SaveDraftResponseSchema,
)
from app.application.exceptions import DraftStorageError, PaymentConfigurationError
from app.application.use_cases.recover_booking import RecoverBookingUseCase
from app.application.use_cases.save_draft import SaveDraftUseCase
from app.application.utils.draft_keys import draft_key
from app.core.config import settings
from app.domain.entities.payment_return import PaymentReturn
from app.infrastructure.payment.moyasar import build_callback_url, build_form_config
from app.wiring.dependencies import get_recover_booking_use_case, get_save_draft_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.put("/client/bookings/draft", response_model=SaveDraftResponseSchema)
def save_draft(
    req: SaveDraftRequestSchema,
    uc: SaveDraftUseCase = Depends(get_save_draft_use_case),
):
    try:
        result = uc.execute(
            values=req.values,
            consultant=req.consultant.to_entity() if req.consultant else None,
            service=req.service.to_entity() if req.service else None,
            attempt_id=req.attempt_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DraftStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))

    callback_url = build_callback_url(settings.PUBLIC_BASE_URL, result.attempt_id) if result.saved else None
    return SaveDraftResponseSchema(saved=result.saved, attempt_id=result.attempt_id, callback_url=callback_url)


@router.post("/client/payments/moyasar/form")
def moyasar_form(req: MoyasarFormRequestSchema) -> dict[str, Any]:
    if settings.DRAFT_SCOPE_PER_ATTEMPT and not req.attempt_id:
        raise HTTPException(status_code=400, detail="attemptId is required; save the booking draft first")
    try:
        draft_key(req.attempt_id)
        return build_form_config(
            amount=req.amount,
            description=req.description,
            publishable_key=settings.MOYASAR_PUBLISHABLE_KEY,
            public_base_url=settings.PUBLIC_BASE_URL,
            attempt_id=req.attempt_id,
            currency=req.currency,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PaymentConfigurationError as e:
        logger.error("Payment form unavailable", extra={"reason": str(e)})
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/client/payment-result", response_model=PaymentResultResponseSchema)
def payment_result(
    status: str | None = Query(None),
    payment_id: str | None = Query(None, alias="id"),
    message: str | None = Query(None),
    attempt: str | None = Query(None),
    uc: RecoverBookingUseCase = Depends(get_recover_booking_use_case),
):
    outcome = uc.execute(PaymentReturn(status=status, payment_id=payment_id, message=message, attempt_id=attempt))
    return PaymentResultResponseSchema(
        status=outcome.status,
        message=outcome.message,
        warning=outcome.warning,
        booking=outcome.booking,
        redirect_to=outcome.redirect_to,
        redirect_after_ms=outcome.redirect_after_ms,
    )
