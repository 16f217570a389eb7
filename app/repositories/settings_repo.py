# app/repositories/settings_repo.py
from sqlmodel import Session

from app.models.app_settings import AppSettings, SETTINGS_ROW_ID


class SettingsRepository:
    """
    Access to the AppSettings singleton row.
    """

    def get(self, session: Session) -> AppSettings | None:
        return session.get(AppSettings, SETTINGS_ROW_ID)

    def save(self, session: Session, settings_row: AppSettings) -> AppSettings:
        session.add(settings_row)
        session.commit()
        session.refresh(settings_row)
        return settings_row
