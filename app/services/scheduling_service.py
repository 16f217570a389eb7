# app/services/scheduling_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.errors import NotFound, SchedulingConflict, ValidationError
from app.core.timeutils import as_utc, input_to_utc
from app.models.order import Order
from app.models.project import Project
from app.models.scheduling import Photographer, PhotoSession, SessionAssignment
from app.repositories.scheduling_repo import SchedulingRepository
from app.schemas.scheduling import (
    PhotographerCreate,
    PhotographerRead,
    PhotographerUpdate,
    SessionCreate,
    SessionUpdate,
    SessionWithPhotographersRead,
)

logger = logging.getLogger(__name__)


def _check_range(start_at: datetime, end_at: datetime) -> None:
    if as_utc(end_at) <= as_utc(start_at):
        raise ValidationError("end_at must be after start_at", field="end_at")


class SchedulingService:
    """
    Photographers, sessions and assignments.

    The one hard rule: a photographer never holds two assignments whose
    sessions overlap ([start, end) half-open, so back-to-back is fine).
    Every write that could break it (assign, reschedule) runs as
    lock-photographer -> check -> write -> commit in one transaction.
    """

    def __init__(self, repo: SchedulingRepository):
        self.repo = repo

    # -------- Photographers --------

    def list_photographers(
        self,
        session: Session,
        is_active: bool | None = None,
    ) -> list[Photographer]:
        return self.repo.list_photographers(session, is_active=is_active)

    def get_photographer(self, session: Session, photographer_id: uuid.UUID) -> Photographer:
        photographer = self.repo.get_photographer(session, photographer_id)
        if not photographer:
            raise NotFound("Photographer not found")
        return photographer

    def create_photographer(self, session: Session, payload: PhotographerCreate) -> Photographer:
        photographer = self.repo.add(session, Photographer(**payload.model_dump()))
        session.commit()
        session.refresh(photographer)
        return photographer

    def update_photographer(
        self,
        session: Session,
        photographer_id: uuid.UUID,
        payload: PhotographerUpdate,
    ) -> Photographer:
        photographer = self.get_photographer(session, photographer_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(photographer, field, value)
        self.repo.add(session, photographer)
        session.commit()
        session.refresh(photographer)
        return photographer

    def delete_photographer(self, session: Session, photographer_id: uuid.UUID) -> None:
        """
        Hard delete only for photographers that never worked a session.
        """
        photographer = self.get_photographer(session, photographer_id)
        if self.repo.count_assignments_for_photographer(session, photographer.id):
            raise ValidationError(
                "Photographer has session assignments; deactivate instead"
            )
        self.repo.delete(session, photographer)
        session.commit()

    # -------- Sessions --------

    def list_sessions(
        self,
        session: Session,
        project_id: uuid.UUID | None = None,
        order_id: uuid.UUID | None = None,
        photographer_id: uuid.UUID | None = None,
        starts_after: datetime | None = None,
        ends_before: datetime | None = None,
    ) -> list[PhotoSession]:
        if starts_after:
            starts_after = input_to_utc(starts_after)
        if ends_before:
            ends_before = input_to_utc(ends_before)
        if starts_after and ends_before and ends_before <= starts_after:
            raise ValidationError("ends_before must be after starts_after", field="ends_before")
        return self.repo.list_sessions(
            session,
            project_id=project_id,
            order_id=order_id,
            photographer_id=photographer_id,
            starts_after=starts_after,
            ends_before=ends_before,
        )

    def get_session(self, session: Session, session_id: uuid.UUID) -> PhotoSession:
        photo_session = self.repo.get_session(session, session_id)
        if not photo_session:
            raise NotFound("Session not found")
        return photo_session

    def _lock_session(self, session: Session, session_id: uuid.UUID) -> PhotoSession:
        photo_session = self.repo.lock_session(session, session_id)
        if not photo_session:
            raise NotFound("Session not found")
        return photo_session

    def get_session_detail(
        self,
        session: Session,
        session_id: uuid.UUID,
    ) -> SessionWithPhotographersRead:
        photo_session = self.get_session(session, session_id)
        photographers = self.repo.list_photographers_for_session(session, session_id)
        return SessionWithPhotographersRead.model_validate(
            {
                **photo_session.model_dump(),
                "photographers": [PhotographerRead.model_validate(p) for p in photographers],
            }
        )

    def create_session(self, session: Session, payload: SessionCreate) -> PhotoSession:
        """
        Schedule a session against a project (and optionally an order).

        Sessions of the same project may overlap; overlap is only checked
        per photographer, at assignment time.
        """
        _check_range(payload.start_at, payload.end_at)

        if session.get(Project, payload.project_id) is None:
            raise NotFound("Project not found")
        if payload.order_id is not None and session.get(Order, payload.order_id) is None:
            raise NotFound("Order not found")

        photo_session = self.repo.add(session, PhotoSession(**payload.model_dump()))
        session.commit()
        session.refresh(photo_session)
        return photo_session

    def update_session(
        self,
        session: Session,
        session_id: uuid.UUID,
        payload: SessionUpdate,
    ) -> PhotoSession:
        """
        Edit or reschedule a session.

        The session row is locked first so a concurrent assignment waits
        for the new time range. When the range changes, every assigned
        photographer is locked and re-checked; any overlap fails with
        SchedulingConflict and nothing is written.
        """
        photo_session = self._lock_session(session, session_id)
        changes = payload.model_dump(exclude_unset=True)

        new_start = changes.get("start_at") or photo_session.start_at
        new_end = changes.get("end_at") or photo_session.end_at
        _check_range(new_start, new_end)

        if changes.get("order_id") is not None and session.get(Order, changes["order_id"]) is None:
            raise NotFound("Order not found")

        if "start_at" in changes or "end_at" in changes:
            assignments = self.repo.list_assignments(session, session_id=photo_session.id)
            for assignment in sorted(assignments, key=lambda a: str(a.photographer_id)):
                self.repo.lock_photographer(session, assignment.photographer_id)
                self._ensure_available(
                    session,
                    assignment.photographer_id,
                    as_utc(new_start),
                    as_utc(new_end),
                    exclude_session_id=photo_session.id,
                )

        for field in ("start_at", "end_at", "status"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        for field, value in changes.items():
            setattr(photo_session, field, value)
        photo_session.updated_at = datetime.now(timezone.utc)

        self.repo.add(session, photo_session)
        session.commit()
        session.refresh(photo_session)
        return photo_session

    def delete_session(self, session: Session, session_id: uuid.UUID) -> None:
        """
        Delete a session and its assignments in one transaction.
        """
        photo_session = self.get_session(session, session_id)
        for assignment in self.repo.list_assignments(session, session_id=photo_session.id):
            self.repo.delete(session, assignment)
        self.repo.delete(session, photo_session)
        session.commit()

    # -------- Assignments --------

    def _ensure_available(
        self,
        session: Session,
        photographer_id: uuid.UUID,
        start_at: datetime,
        end_at: datetime,
        exclude_session_id: uuid.UUID | None = None,
    ) -> None:
        clashes = self.repo.find_overlapping_sessions(
            session,
            photographer_id,
            start_at,
            end_at,
            exclude_session_id=exclude_session_id,
        )
        if clashes:
            logger.info(
                f"Scheduling conflict: photographer {photographer_id} busy "
                f"in sessions {[str(s.id) for s in clashes]}"
            )
            session.rollback()
            raise SchedulingConflict(
                "Photographer is busy: another session overlaps this time",
                photographer_id=str(photographer_id),
                conflicting_session_ids=[str(s.id) for s in clashes],
            )

    def list_assignments(
        self,
        session: Session,
        session_id: uuid.UUID | None = None,
        photographer_id: uuid.UUID | None = None,
    ) -> list[SessionAssignment]:
        return self.repo.list_assignments(
            session,
            session_id=session_id,
            photographer_id=photographer_id,
        )

    def assign_photographer(
        self,
        session: Session,
        session_id: uuid.UUID,
        photographer_id: uuid.UUID,
    ) -> SessionAssignment:
        """
        Assign a photographer to a session.

        Steps (single transaction):
          1. Lock the session row, then the photographer row
             (SELECT ... FOR UPDATE), and read the time range from the
             locked session.
          2. Refuse inactive photographers and duplicate pairs.
          3. Look for an assigned session overlapping [start, end).
          4. Insert the assignment and commit.
        """
        photo_session = self._lock_session(session, session_id)

        photographer = self.repo.lock_photographer(session, photographer_id)
        if not photographer:
            raise NotFound("Photographer not found")
        if not photographer.is_active:
            raise ValidationError("Photographer is inactive", field="photographer_id")

        if self.repo.find_assignment(session, photo_session.id, photographer.id):
            raise ValidationError(
                "Photographer is already assigned to this session",
                field="photographer_id",
            )

        self._ensure_available(
            session,
            photographer.id,
            as_utc(photo_session.start_at),
            as_utc(photo_session.end_at),
            exclude_session_id=photo_session.id,
        )

        try:
            assignment = self.repo.add(
                session,
                SessionAssignment(session_id=photo_session.id, photographer_id=photographer.id),
            )
            session.commit()
        except IntegrityError:
            # concurrent insert of the same pair won the race
            session.rollback()
            raise ValidationError(
                "Photographer is already assigned to this session",
                field="photographer_id",
            )

        session.refresh(assignment)
        logger.info(f"Assigned photographer {photographer.id} to session {photo_session.id}")
        return assignment

    def unassign(self, session: Session, assignment_id: uuid.UUID) -> None:
        """
        Remove an assignment. Unknown ids are reported as NotFound.
        """
        assignment = self.repo.get_assignment(session, assignment_id)
        if not assignment:
            raise NotFound("Assignment not found")
        self.repo.delete(session, assignment)
        session.commit()
