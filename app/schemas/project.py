# app/schemas/project.py
import uuid
from datetime import date, datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProjectCreate(SQLModel):
    """
    Payload for creating a portfolio project.

    - slug is optional: if omitted, generated from `title`.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=200)
    slug: str | None = None
    category_id: uuid.UUID | None = None
    order_id: uuid.UUID | None = None
    client_name: str | None = Field(default=None, max_length=200)
    happened_at: date | None = None
    main_image_url: str | None = None
    description: str | None = None
    is_published: bool = False
    drive_link: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty")
        return v

    @field_validator("slug", "client_name", "main_image_url", "drive_link")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ProjectUpdate(SQLModel):
    """
    Partial update payload for projects. All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=200)
    slug: str | None = None
    category_id: uuid.UUID | None = None
    order_id: uuid.UUID | None = None
    client_name: str | None = Field(default=None, max_length=200)
    happened_at: date | None = None
    main_image_url: str | None = None
    description: str | None = None
    is_published: bool | None = None
    drive_link: str | None = None

    @field_validator("title", "slug")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProjectRead(SQLModel):
    id: uuid.UUID
    title: str
    slug: str
    category_id: uuid.UUID | None
    order_id: uuid.UUID | None
    client_name: str | None
    happened_at: date | None
    main_image_url: str | None
    description: str | None
    is_published: bool
    drive_link: str | None
    created_at: datetime
    updated_at: datetime


class ProjectImageCreate(SQLModel):
    """
    New gallery image. Appended at the end when sort_order is omitted.
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    caption: str | None = Field(default=None, max_length=255)
    sort_order: int | None = Field(default=None, ge=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty")
        return v


class ProjectImageUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    url: str | None = None
    caption: str | None = Field(default=None, max_length=255)
    sort_order: int | None = Field(default=None, ge=0)


class ProjectImageRead(SQLModel):
    """
    Read model for gallery images.
    """

    id: uuid.UUID
    project_id: uuid.UUID
    url: str
    caption: str | None
    sort_order: int
