# app/routers/photographers.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.scheduling_repo import SchedulingRepository
from app.schemas.scheduling import (
    PhotographerCreate,
    PhotographerRead,
    PhotographerUpdate,
)
from app.services.scheduling_service import SchedulingService

# Roster is back-office only
router = APIRouter(
    prefix="/photographers",
    tags=["Photographers"],
    dependencies=[Depends(require_admin)],
)

repo = SchedulingRepository()
service = SchedulingService(repo)


@router.get("", response_model=list[PhotographerRead])
def list_photographers(
    session: Session = Depends(get_session),
    active: bool | None = None,
):
    """
    List photographers. `?active=true` gives the ones offered for assignment.
    """
    return service.list_photographers(session, is_active=active)


@router.get("/{photographer_id}", response_model=PhotographerRead)
def get_photographer(
    photographer_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_photographer(session, photographer_id)


@router.post(
    "",
    response_model=PhotographerRead,
    status_code=status.HTTP_201_CREATED,
)
def create_photographer(
    payload: PhotographerCreate,
    session: Session = Depends(get_session),
):
    return service.create_photographer(session, payload)


@router.patch("/{photographer_id}", response_model=PhotographerRead)
def update_photographer(
    photographer_id: uuid.UUID,
    payload: PhotographerUpdate,
    session: Session = Depends(get_session),
):
    """
    Edit or (de)activate a photographer.
    """
    return service.update_photographer(session, photographer_id, payload)


@router.delete(
    "/{photographer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_photographer(
    photographer_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.delete_photographer(session, photographer_id)
    return None
