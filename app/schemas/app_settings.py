# app/schemas/app_settings.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class AppSettingsRead(SQLModel):
    calendar_start_hour: int
    calendar_end_hour: int
    timezone: str
    updated_at: datetime


class AppSettingsUpdate(SQLModel):
    """
    Calendar hour range (24h clock). start must stay below end;
    that cross-field rule is checked by the service.
    """

    model_config = ConfigDict(extra="forbid")

    calendar_start_hour: int | None = Field(default=None, ge=0, le=23)
    calendar_end_hour: int | None = Field(default=None, ge=0, le=23)
