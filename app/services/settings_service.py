# app/services/settings_service.py
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import ValidationError
from app.models.app_settings import AppSettings, SETTINGS_ROW_ID
from app.repositories.settings_repo import SettingsRepository
from app.schemas.app_settings import AppSettingsRead, AppSettingsUpdate


class SettingsService:
    def __init__(self, repo: SettingsRepository):
        self.repo = repo

    def get_or_create(self, session: Session) -> AppSettings:
        """
        The singleton row, created with defaults on first read.
        """
        row = self.repo.get(session)
        if row is None:
            row = self.repo.save(session, AppSettings(id=SETTINGS_ROW_ID))
        return row

    @staticmethod
    def to_read(row: AppSettings) -> AppSettingsRead:
        return AppSettingsRead(
            calendar_start_hour=row.calendar_start_hour,
            calendar_end_hour=row.calendar_end_hour,
            timezone=get_settings().DISPLAY_TIMEZONE,
            updated_at=row.updated_at,
        )

    def read(self, session: Session) -> AppSettingsRead:
        return self.to_read(self.get_or_create(session))

    def update(self, session: Session, payload: AppSettingsUpdate) -> AppSettingsRead:
        row = self.get_or_create(session)

        start_hour = row.calendar_start_hour
        end_hour = row.calendar_end_hour
        if payload.calendar_start_hour is not None:
            start_hour = payload.calendar_start_hour
        if payload.calendar_end_hour is not None:
            end_hour = payload.calendar_end_hour

        if start_hour >= end_hour:
            raise ValidationError(
                "calendar_start_hour must be before calendar_end_hour",
                field="calendar_end_hour",
            )

        row.calendar_start_hour = start_hour
        row.calendar_end_hour = end_hour
        row.updated_at = datetime.now(timezone.utc)
        return self.to_read(self.repo.save(session, row))
