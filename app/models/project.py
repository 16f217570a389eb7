# app/models/project.py
import uuid
from datetime import date, datetime, timezone

from sqlmodel import SQLModel, Field


class Project(SQLModel, table=True):
    """
    Portfolio gallery entry.

    Optionally linked (after the fact) to the Order it was shot for.
    Unpublished projects never appear in the public listing.
    """

    __tablename__ = "projects"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    title: str = Field(
        max_length=200,
        index=True,
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    order_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
        description="Order this project was delivered for (optional)",
    )

    client_name: str | None = Field(default=None, max_length=200)

    happened_at: date | None = Field(
        default=None,
        description="Shoot date shown on the project page",
    )

    main_image_url: str | None = Field(
        default=None,
        description="Cover image URL",
    )

    description: str | None = None

    is_published: bool = Field(
        default=False,
        index=True,
    )

    drive_link: str | None = Field(
        default=None,
        description="Private delivery folder for the client",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProjectImage(SQLModel, table=True):
    """
    One photo inside a Project gallery, ordered by sort_order.
    """

    __tablename__ = "project_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    project_id: uuid.UUID = Field(
        foreign_key="projects.id",
        ondelete="CASCADE",
        index=True,
        description="FK to projects.id",
    )

    url: str = Field(description="Public image URL")

    caption: str | None = Field(default=None, max_length=255)

    sort_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the gallery",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
