# app/schemas/order.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from app.models.order import OrderChannel, OrderStatus, PaymentStatus


class OrderCreate(SQLModel):
    """
    Public checkout payload.

    Customer provides:
      - category (and optionally a tier)
      - contact details
      - notes (optional)

    Backend derives:
      - total_price / dp_percent / dp_amount from the catalog
      - status = PENDING, channel = ONLINE
      - Snap token for the down payment
    """

    model_config = ConfigDict(extra="forbid")

    category_id: uuid.UUID
    price_tier_id: uuid.UUID | None = None
    customer_name: str = Field(max_length=200)
    email: EmailStr
    phone: str = Field(max_length=50)
    notes: str | None = None

    @field_validator("customer_name", "phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OfflineOrderCreate(OrderCreate):
    """
    Admin-entered order (walk-in, WhatsApp...). No gateway checkout.
    """

    dp_percent: int | None = Field(default=None, ge=0, le=100)


class OrderUpdate(SQLModel):
    """
    Admin edit form. `status` may jump forward (or cancel);
    use /advance for the one-step shortcut.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus | None = None
    drive_link: str | None = None
    notes: str | None = None
    customer_name: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)

    @field_validator("drive_link", "notes")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    id: uuid.UUID
    category_id: uuid.UUID
    price_tier_id: uuid.UUID | None
    customer_name: str
    email: str
    phone: str
    notes: str | None
    total_price: int
    dp_percent: int
    dp_amount: int
    status: OrderStatus
    payment_status: PaymentStatus | None
    channel: OrderChannel
    drive_link: str | None
    created_at: datetime
    updated_at: datetime


class CheckoutRead(SQLModel):
    """
    Response of the public checkout: the order plus the Snap handles.
    """

    order: OrderRead
    snap_token: str
    redirect_url: str
    amount_due: int
