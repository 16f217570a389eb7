# app/schemas/payment.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.models.order import PaymentStatus, PaymentType


class PaymentRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    provider: str
    type: PaymentType
    status: PaymentStatus
    gross_amount: int
    external_transaction_id: str | None
    method: str | None
    paid_at: datetime | None
    created_at: datetime


class ManualPaymentCreate(SQLModel):
    """
    Admin-recorded payment (cash, manual bank transfer).
    """

    model_config = ConfigDict(extra="forbid")

    type: PaymentType = PaymentType.DOWN_PAYMENT
    gross_amount: int = Field(gt=0)
    method: str | None = Field(default="cash", max_length=50)
    paid_at: datetime | None = None


class MidtransNotification(SQLModel):
    """
    Midtrans HTTP notification body.

    Every field is optional so that malformed notifications reach the
    signature check (and are rejected there) instead of failing parsing.
    Unknown fields are ignored: Midtrans adds fields per payment method.
    """

    model_config = ConfigDict(extra="ignore")

    order_id: str | None = None
    status_code: str | None = None
    gross_amount: str | None = None
    signature_key: str | None = None
    transaction_status: str | None = None
    transaction_id: str | None = None
    payment_type: str | None = None
    fraud_status: str | None = None
    settlement_time: str | None = None

    @field_validator("status_code", "gross_amount", mode="before")
    @classmethod
    def coerce_str(cls, v):
        # Midtrans sends strings, but some simulators post numbers
        if v is None or isinstance(v, str):
            return v
        return str(v)


class NotificationAck(SQLModel):
    status: str
    payment_id: uuid.UUID | None = None
