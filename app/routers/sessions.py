# app/routers/sessions.py
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.scheduling_repo import SchedulingRepository
from app.schemas.scheduling import (
    AssignmentCreate,
    AssignmentRead,
    SessionCreate,
    SessionRead,
    SessionUpdate,
    SessionWithPhotographersRead,
)
from app.services.scheduling_service import SchedulingService

# Scheduling is back-office only
router = APIRouter(tags=["Sessions"], dependencies=[Depends(require_admin)])

repo = SchedulingRepository()
service = SchedulingService(repo)


# -------- Sessions --------


@router.get("/sessions", response_model=list[SessionRead])
def list_sessions(
    session: Session = Depends(get_session),
    project_id: uuid.UUID | None = None,
    order_id: uuid.UUID | None = None,
    photographer_id: uuid.UUID | None = None,
    starts_after: datetime | None = None,
    ends_before: datetime | None = None,
):
    """
    List sessions ordered by start time.

    `starts_after` / `ends_before` keep sessions intersecting that range;
    naive values are studio-local time.
    """
    return service.list_sessions(
        session,
        project_id=project_id,
        order_id=order_id,
        photographer_id=photographer_id,
        starts_after=starts_after,
        ends_before=ends_before,
    )


@router.get("/sessions/{session_id}", response_model=SessionWithPhotographersRead)
def get_session_detail(
    session_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_session_detail(session, session_id)


@router.post(
    "/sessions",
    response_model=SessionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    payload: SessionCreate,
    session: Session = Depends(get_session),
):
    """
    Schedule a session for a project. end_at must be after start_at.
    """
    return service.create_session(session, payload)


@router.patch("/sessions/{session_id}", response_model=SessionRead)
def update_session(
    session_id: uuid.UUID,
    payload: SessionUpdate,
    session: Session = Depends(get_session),
):
    """
    Edit or reschedule. 409 when a new time range double-books an
    assigned photographer.
    """
    return service.update_session(session, session_id, payload)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_session(
    session_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a session together with its assignments.
    """
    service.delete_session(session, session_id)
    return None


# -------- Assignments --------


@router.post(
    "/sessions/{session_id}/assign",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def assign_photographer(
    session_id: uuid.UUID,
    payload: AssignmentCreate,
    session: Session = Depends(get_session),
):
    """
    Assign a photographer to a session.

    - 400 if the photographer is inactive or already on this session.
    - 409 (`scheduling_conflict`) if they are busy in an overlapping session.
    """
    return service.assign_photographer(session, session_id, payload.photographer_id)


@router.get("/session-assignments", response_model=list[AssignmentRead])
def list_assignments(
    session: Session = Depends(get_session),
    session_id: uuid.UUID | None = None,
    photographer_id: uuid.UUID | None = None,
):
    return service.list_assignments(
        session,
        session_id=session_id,
        photographer_id=photographer_id,
    )


@router.delete(
    "/session-assignments/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def unassign_photographer(
    assignment_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Remove an assignment. 404 if it does not exist.
    """
    service.unassign(session, assignment_id)
    return None
