# app/models/catalog.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    A bookable photography package family (Wedding, Prewedding, Graduation...).

    Long-lived reference data: deactivate instead of deleting once orders,
    tiers or projects reference it.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the package family",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(
        default=None,
        description="Optional marketing copy",
    )

    base_price: int = Field(
        default=0,
        ge=0,
        description="Price (IDR) used when no tier is selected",
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this category can be ordered",
    )

    sort_order: int = Field(
        default=0,
        description="Ordering index on the pricing page",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last modification timestamp (UTC)",
    )


class PriceTier(SQLModel, table=True):
    """
    A priced variant within a Category (e.g. "Premium Package" under "Wedding").
    """

    __tablename__ = "price_tiers"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        index=True,
        description="FK to categories.id",
    )

    name: str = Field(
        max_length=100,
        description="Tier display name",
    )

    description: str | None = None

    price: int = Field(
        ge=0,
        description="Total price (IDR) for this tier",
    )

    session_count: int = Field(
        default=1,
        ge=1,
        description="Number of shooting sessions included",
    )

    # minutes per session
    session_duration: int = Field(
        default=60,
        gt=0,
        description="Length of each session in minutes",
    )

    is_active: bool = Field(
        default=True,
        index=True,
    )

    sort_order: int = Field(default=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
