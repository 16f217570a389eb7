# app/models/order.py
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field


class OrderStatus(str, Enum):
    """Fulfillment stage of an order (kanban columns)."""

    PENDING = "PENDING"
    CONSULTATION = "CONSULTATION"
    SESSION = "SESSION"
    FINISHING = "FINISHING"
    DRIVE_LINK = "DRIVE_LINK"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class OrderChannel(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class PaymentStatus(str, Enum):
    """Midtrans transaction_status values."""

    PENDING = "pending"
    CAPTURE = "capture"
    SETTLEMENT = "settlement"
    DENY = "deny"
    CANCEL = "cancel"
    EXPIRE = "expire"
    REFUND = "refund"
    PARTIAL_REFUND = "partial_refund"
    FAILURE = "failure"


class PaymentType(str, Enum):
    DOWN_PAYMENT = "DOWN_PAYMENT"
    FULL_PAYMENT = "FULL_PAYMENT"


class Order(SQLModel, table=True):
    """
    Customer booking for a category/tier.

    Money is stored in whole IDR:
      - total_price: tier price, or category base price without tier
      - dp_amount  : round(total_price * dp_percent / 100)

    `status` is the fulfillment stage; `payment_status` mirrors the latest
    gateway notification. The two are deliberately independent.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        index=True,
    )

    price_tier_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="price_tiers.id",
        index=True,
    )

    customer_name: str = Field(max_length=200)
    email: str = Field(max_length=255)
    phone: str = Field(max_length=50)
    notes: str | None = None

    total_price: int = Field(ge=0)
    dp_percent: int = Field(default=30, ge=0, le=100)
    dp_amount: int = Field(ge=0)

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        index=True,
        description="Fulfillment stage",
    )

    payment_status: PaymentStatus | None = Field(
        default=None,
        index=True,
        description="Latest gateway status (None = no payment yet)",
    )

    channel: OrderChannel = Field(default=OrderChannel.ONLINE)

    # Meaningful once status reaches DRIVE_LINK (UI convention only)
    drive_link: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Payment(SQLModel, table=True):
    """
    One payment attempt/record against an Order.

    Gateway notifications are keyed by (provider, external_transaction_id)
    so redelivered callbacks update the same row.
    """

    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint(
            "provider",
            "external_transaction_id",
            name="uq_payments_provider_transaction",
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    # midtrans | manual
    provider: str = Field(default="midtrans", max_length=30)

    type: PaymentType = Field(default=PaymentType.DOWN_PAYMENT)

    status: PaymentStatus = Field(default=PaymentStatus.PENDING, index=True)

    gross_amount: int = Field(ge=0)

    external_transaction_id: str | None = Field(
        default=None,
        max_length=100,
        description="Gateway transaction_id",
    )

    status_code: str | None = Field(default=None, max_length=10)

    # e.g. bank_transfer, gopay, qris, cash
    method: str | None = Field(default=None, max_length=50)

    paid_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
