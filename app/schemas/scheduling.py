# app/schemas/scheduling.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.core.timeutils import as_utc, input_to_utc
from app.models.scheduling import SessionStatus


# ---- Photographers ----


class PhotographerCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    contact: str = Field(max_length=200)
    is_active: bool = True

    @field_validator("name", "contact")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class PhotographerUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    contact: str | None = Field(default=None, max_length=200)
    is_active: bool | None = None

    @field_validator("name", "contact")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class PhotographerRead(SQLModel):
    id: uuid.UUID
    name: str
    contact: str
    is_active: bool
    created_at: datetime


# ---- Sessions ----


class SessionCreate(SQLModel):
    """
    Payload for scheduling a session.

    Naive datetimes are read as studio-local wall clock time; everything
    is stored in UTC. end_at must be strictly after start_at.
    """

    model_config = ConfigDict(extra="forbid")

    project_id: uuid.UUID
    order_id: uuid.UUID | None = None
    start_at: datetime
    end_at: datetime
    location: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    status: SessionStatus = SessionStatus.PLANNED

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_instant(cls, v: datetime) -> datetime:
        return input_to_utc(v)


class SessionUpdate(SQLModel):
    """
    Partial update. Changing the time range re-checks every assigned
    photographer for double-booking.
    """

    model_config = ConfigDict(extra="forbid")

    order_id: uuid.UUID | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    location: str | None = Field(default=None, max_length=255)
    notes: str | None = None
    status: SessionStatus | None = None

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_instant(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        return input_to_utc(v)


class SessionRead(SQLModel):
    id: uuid.UUID
    project_id: uuid.UUID
    order_id: uuid.UUID | None
    start_at: datetime
    end_at: datetime
    location: str | None
    notes: str | None
    status: SessionStatus
    created_at: datetime
    updated_at: datetime

    @field_validator("start_at", "end_at")
    @classmethod
    def attach_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class SessionWithPhotographersRead(SessionRead):
    photographers: list[PhotographerRead]


# ---- Assignments ----


class AssignmentCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    photographer_id: uuid.UUID


class AssignmentRead(SQLModel):
    id: uuid.UUID
    session_id: uuid.UUID
    photographer_id: uuid.UUID
    created_at: datetime
