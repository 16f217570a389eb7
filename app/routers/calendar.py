# app/routers/calendar.py
import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.scheduling_repo import SchedulingRepository
from app.repositories.settings_repo import SettingsRepository
from app.schemas.calendar import WeekView
from app.services.calendar_service import CalendarService, default_reference_date
from app.services.settings_service import SettingsService

router = APIRouter(
    prefix="/calendar",
    tags=["Calendar"],
    dependencies=[Depends(require_admin)],
)

service = CalendarService(SchedulingRepository(), SettingsService(SettingsRepository()))


@router.get("/week", response_model=WeekView)
def get_week(
    session: Session = Depends(get_session),
    reference: date | None = Query(default=None, alias="date"),
    photographer_id: uuid.UUID | None = None,
):
    """
    Sunday-to-Saturday calendar containing `date` (default: today, studio time).

    `photographer_id` narrows blocks and workload to one photographer.
    """
    return service.week(
        session,
        reference or default_reference_date(),
        photographer_id=photographer_id,
    )
