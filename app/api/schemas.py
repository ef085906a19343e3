from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.booking_draft import ConsultantSnapshot, ServiceSnapshot
from app.domain.entities.recovery import RecoveryStatus


class ConsultantSnapshotSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    price_per_session: float | None = Field(None, alias="pricePerSession")
    duration: int | None = None

    def to_entity(self) -> ConsultantSnapshot:
        return ConsultantSnapshot(
            id=self.id,
            name=self.name,
            price_per_session=self.price_per_session,
            duration=self.duration,
        )


class ServiceSnapshotSchema(BaseModel):
    id: str
    title: str | None = None

    def to_entity(self) -> ServiceSnapshot:
        return ServiceSnapshot(id=self.id, title=self.title)


class SaveDraftRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    values: dict[str, Any] = Field(default_factory=dict)
    consultant: ConsultantSnapshotSchema | None = None
    service: ServiceSnapshotSchema | None = None
    attempt_id: str | None = Field(None, alias="attemptId")


class SaveDraftResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    saved: bool
    attempt_id: str | None = Field(None, alias="attemptId")
    callback_url: str | None = Field(None, alias="callbackUrl")


class MoyasarFormRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(gt=0)
    currency: str = "SAR"
    description: str
    attempt_id: str | None = Field(None, alias="attemptId")


class PaymentResultResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: RecoveryStatus
    message: str | None = None
    warning: str | None = None
    booking: dict[str, Any] | None = None
    redirect_to: str | None = Field(None, alias="redirectTo")
    redirect_after_ms: int | None = Field(None, alias="redirectAfterMs")
