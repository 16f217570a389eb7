# app/schemas/catalog.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


class CategoryCreate(SQLModel):
    """
    Payload for creating a category.

    - slug is optional: if omitted, generated from `name`.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    slug: str | None = None
    description: str | None = None
    base_price: int = Field(default=0, ge=0)
    is_active: bool = True
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class CategoryUpdate(SQLModel):
    """
    Partial update payload for categories.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    slug: str | None = None
    description: str | None = None
    base_price: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    sort_order: int | None = None

    @field_validator("name", "slug")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)


class CategoryRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    base_price: int
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class PriceTierCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    category_id: uuid.UUID
    name: str = Field(max_length=100)
    description: str | None = None
    price: int = Field(ge=0)
    session_count: int = Field(default=1, ge=1)
    session_duration: int = Field(default=60, gt=0)
    is_active: bool = True
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v)


class PriceTierUpdate(SQLModel):
    """
    Partial update payload for tiers. A tier cannot move between categories.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    price: int | None = Field(default=None, ge=0)
    session_count: int | None = Field(default=None, ge=1)
    session_duration: int | None = Field(default=None, gt=0)
    is_active: bool | None = None
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)


class PriceTierRead(SQLModel):
    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    description: str | None
    price: int
    session_count: int
    session_duration: int
    is_active: bool
    sort_order: int


class PriceQuote(SQLModel):
    """
    Price breakdown shown on the order page before checkout.
    """

    category_id: uuid.UUID
    price_tier_id: uuid.UUID | None
    total_price: int
    dp_percent: int
    dp_amount: int
    remaining_amount: int
