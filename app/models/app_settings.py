# app/models/app_settings.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

SETTINGS_ROW_ID = 1


class AppSettings(SQLModel, table=True):
    """
    Admin-editable singleton (id = 1) controlling the calendar hour range.

    The display timezone is not stored here; it is fixed by configuration.
    """

    __tablename__ = "app_settings"

    id: int = Field(default=SETTINGS_ROW_ID, primary_key=True)

    calendar_start_hour: int = Field(default=6, ge=0, le=23)
    calendar_end_hour: int = Field(default=20, ge=0, le=23)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
