# app/repositories/scheduling_repo.py
import uuid
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.scheduling import Photographer, PhotoSession, SessionAssignment


class SchedulingRepository:
    """
    Data access layer for photographers, sessions and assignments.

    NOTE:
      - No commits here; assignment is a check-then-insert transaction.
        The service is responsible for calling session.commit().
    """

    # ---- Photographers ----

    def get_photographer(
        self,
        session: Session,
        photographer_id: uuid.UUID,
    ) -> Photographer | None:
        return session.get(Photographer, photographer_id)

    def lock_photographer(
        self,
        session: Session,
        photographer_id: uuid.UUID,
    ) -> Photographer | None:
        """
        SELECT ... FOR UPDATE on the photographer row.

        Serializes concurrent assignment requests for the same photographer
        until the surrounding transaction commits or rolls back.
        """
        stmt = (
            select(Photographer)
            .where(Photographer.id == photographer_id)
            .with_for_update()
        )
        return session.exec(stmt).first()

    def list_photographers(
        self,
        session: Session,
        is_active: bool | None = None,
    ) -> list[Photographer]:
        stmt = select(Photographer)
        if is_active is not None:
            stmt = stmt.where(Photographer.is_active == is_active)
        stmt = stmt.order_by(Photographer.name)
        return session.exec(stmt).all()

    def add(self, session: Session, obj):
        session.add(obj)
        session.flush()
        session.refresh(obj)
        return obj

    def delete(self, session: Session, obj) -> None:
        session.delete(obj)
        session.flush()

    # ---- Sessions ----

    def get_session(self, session: Session, session_id: uuid.UUID) -> PhotoSession | None:
        return session.get(PhotoSession, session_id)

    def lock_session(self, session: Session, session_id: uuid.UUID) -> PhotoSession | None:
        """
        SELECT ... FOR UPDATE on the session row.

        Reschedules and assignments of the same session queue up behind
        each other. The row is re-read from the database so a copy already
        in the identity map cannot hide a committed time change.
        """
        stmt = (
            select(PhotoSession)
            .where(PhotoSession.id == session_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return session.exec(stmt).first()

    def list_sessions(
        self,
        session: Session,
        project_id: uuid.UUID | None = None,
        order_id: uuid.UUID | None = None,
        photographer_id: uuid.UUID | None = None,
        starts_after: datetime | None = None,
        ends_before: datetime | None = None,
    ) -> list[PhotoSession]:
        """
        Sessions matching the filters. A time range keeps sessions that
        intersect [starts_after, ends_before).
        """
        stmt = select(PhotoSession)
        if project_id is not None:
            stmt = stmt.where(PhotoSession.project_id == project_id)
        if order_id is not None:
            stmt = stmt.where(PhotoSession.order_id == order_id)
        if photographer_id is not None:
            stmt = stmt.join(
                SessionAssignment,
                SessionAssignment.session_id == PhotoSession.id,
            ).where(SessionAssignment.photographer_id == photographer_id)
        if starts_after is not None:
            stmt = stmt.where(PhotoSession.end_at > starts_after)
        if ends_before is not None:
            stmt = stmt.where(PhotoSession.start_at < ends_before)
        stmt = stmt.order_by(PhotoSession.start_at)
        return session.exec(stmt).all()

    def find_overlapping_sessions(
        self,
        session: Session,
        photographer_id: uuid.UUID,
        start_at: datetime,
        end_at: datetime,
        exclude_session_id: uuid.UUID | None = None,
    ) -> list[PhotoSession]:
        """
        Sessions already assigned to the photographer whose [start, end)
        intersects [start_at, end_at):

            other.start < end_at AND start_at < other.end
        """
        stmt = (
            select(PhotoSession)
            .join(
                SessionAssignment,
                SessionAssignment.session_id == PhotoSession.id,
            )
            .where(
                SessionAssignment.photographer_id == photographer_id,
                PhotoSession.start_at < end_at,
                PhotoSession.end_at > start_at,
            )
        )
        if exclude_session_id is not None:
            stmt = stmt.where(PhotoSession.id != exclude_session_id)
        return session.exec(stmt.order_by(PhotoSession.start_at)).all()

    # ---- Assignments ----

    def get_assignment(
        self,
        session: Session,
        assignment_id: uuid.UUID,
    ) -> SessionAssignment | None:
        return session.get(SessionAssignment, assignment_id)

    def find_assignment(
        self,
        session: Session,
        session_id: uuid.UUID,
        photographer_id: uuid.UUID,
    ) -> SessionAssignment | None:
        stmt = select(SessionAssignment).where(
            SessionAssignment.session_id == session_id,
            SessionAssignment.photographer_id == photographer_id,
        )
        return session.exec(stmt).first()

    def list_assignments(
        self,
        session: Session,
        session_id: uuid.UUID | None = None,
        photographer_id: uuid.UUID | None = None,
    ) -> list[SessionAssignment]:
        stmt = select(SessionAssignment)
        if session_id is not None:
            stmt = stmt.where(SessionAssignment.session_id == session_id)
        if photographer_id is not None:
            stmt = stmt.where(SessionAssignment.photographer_id == photographer_id)
        return session.exec(stmt.order_by(SessionAssignment.created_at)).all()

    def list_photographers_for_session(
        self,
        session: Session,
        session_id: uuid.UUID,
    ) -> list[Photographer]:
        stmt = (
            select(Photographer)
            .join(
                SessionAssignment,
                SessionAssignment.photographer_id == Photographer.id,
            )
            .where(SessionAssignment.session_id == session_id)
            .order_by(Photographer.name)
        )
        return session.exec(stmt).all()

    def count_assignments_for_photographer(
        self,
        session: Session,
        photographer_id: uuid.UUID,
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(SessionAssignment)
            .where(SessionAssignment.photographer_id == photographer_id)
        )
        return int(session.exec(stmt).one() or 0)
