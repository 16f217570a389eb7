# app/routers/settings.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.settings_repo import SettingsRepository
from app.schemas.app_settings import AppSettingsRead, AppSettingsUpdate
from app.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])

repo = SettingsRepository()
service = SettingsService(repo)


@router.get("/app", response_model=AppSettingsRead)
def get_app_settings(session: Session = Depends(get_session)):
    """
    Calendar hour range and display timezone.
    """
    return service.read(session)


@router.patch(
    "/app",
    response_model=AppSettingsRead,
    dependencies=[Depends(require_admin)],
)
def update_app_settings(
    payload: AppSettingsUpdate,
    session: Session = Depends(get_session),
):
    return service.update(session, payload)
