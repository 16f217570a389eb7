# app/schemas/calendar.py
import uuid
from datetime import date, datetime

from sqlmodel import SQLModel

from app.models.scheduling import SessionStatus


class CalendarPhotographer(SQLModel):
    id: uuid.UUID
    name: str


class CalendarBlock(SQLModel):
    """
    One session positioned inside a day column.

    top/height are pixels from local midnight (HOUR_HEIGHT px per hour).
    Times are in the studio display timezone.
    """

    session_id: uuid.UUID
    project_id: uuid.UUID
    project_title: str | None
    order_id: uuid.UUID | None
    customer_name: str | None
    start_at: datetime
    end_at: datetime
    location: str | None
    status: SessionStatus
    photographers: list[CalendarPhotographer]
    top: float
    height: float


class CalendarDay(SQLModel):
    date: date
    blocks: list[CalendarBlock]


class WeekStats(SQLModel):
    total: int
    planned: int
    confirmed: int
    done: int
    cancelled: int


class PhotographerWorkload(SQLModel):
    photographer_id: uuid.UUID
    name: str
    session_count: int
    hours: float


class WeekView(SQLModel):
    """
    Sunday-to-Saturday read model for the admin calendar.
    """

    timezone: str
    week_start: date
    week_end: date
    start_hour: int
    end_hour: int
    hour_height: int
    days: list[CalendarDay]
    stats: WeekStats
    workload: list[PhotographerWorkload]
