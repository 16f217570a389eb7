# app/models/scheduling.py
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field


class SessionStatus(str, Enum):
    PLANNED = "PLANNED"
    CONFIRMED = "CONFIRMED"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class Photographer(SQLModel, table=True):
    """
    Staff member assignable to shooting sessions.

    Inactive photographers stay in the table (history) but cannot be
    assigned to new sessions.
    """

    __tablename__ = "photographers"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100, index=True)

    # phone / email / instagram handle
    contact: str = Field(max_length=200)

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class PhotoSession(SQLModel, table=True):
    """
    A scheduled shooting time block, [start_at, end_at) in UTC.

    Named PhotoSession in code to avoid clashing with the DB Session;
    the table and API resource are "sessions".
    """

    __tablename__ = "sessions"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    project_id: uuid.UUID = Field(
        foreign_key="projects.id",
        index=True,
    )

    order_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
    )

    start_at: datetime = Field(
        sa_type=DateTime(timezone=True),
        index=True,
    )

    end_at: datetime = Field(
        sa_type=DateTime(timezone=True),
        index=True,
    )

    location: str | None = Field(default=None, max_length=255)
    notes: str | None = None

    status: SessionStatus = Field(default=SessionStatus.PLANNED, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class SessionAssignment(SQLModel, table=True):
    """
    A photographer working a session.

    A photographer never holds two assignments whose sessions overlap;
    that rule is enforced by the scheduling service under a row lock.
    """

    __tablename__ = "session_assignments"
    __table_args__ = (
        UniqueConstraint(
            "session_id",
            "photographer_id",
            name="uq_session_assignments_session_photographer",
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    session_id: uuid.UUID = Field(
        foreign_key="sessions.id",
        ondelete="CASCADE",
        index=True,
    )

    photographer_id: uuid.UUID = Field(
        foreign_key="photographers.id",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
