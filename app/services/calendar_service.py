# app/services/calendar_service.py
import uuid
from collections import defaultdict
from datetime import date, datetime, time, timedelta, tzinfo

from sqlmodel import Session

from app.core.timeutils import as_utc, display_tz
from app.models.order import Order
from app.models.project import Project
from app.models.scheduling import (
    Photographer,
    PhotoSession,
    SessionAssignment,
    SessionStatus,
)
from app.repositories.scheduling_repo import SchedulingRepository
from app.schemas.calendar import (
    CalendarBlock,
    CalendarDay,
    CalendarPhotographer,
    PhotographerWorkload,
    WeekStats,
    WeekView,
)
from app.services.settings_service import SettingsService

# Pixels per hour in the day columns
HOUR_HEIGHT = 60
# Shortest block ever rendered
MIN_BLOCK_HEIGHT = 30


def week_bounds(reference: date) -> tuple[date, date]:
    """
    Sunday..Saturday week containing `reference` (both inclusive).
    """
    start = reference - timedelta(days=(reference.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def _fractional_hour(value: datetime) -> float:
    return value.hour + value.minute / 60 + value.second / 3600


def block_geometry(local_start: datetime, local_end: datetime) -> tuple[float, float]:
    """
    (top, height) in pixels from local midnight of the start day.

    A session running past midnight is clipped to the end of its day.
    """
    start_hour = _fractional_hour(local_start)
    if local_end.date() > local_start.date():
        end_hour = 24.0
    else:
        end_hour = _fractional_hour(local_end)
    top = start_hour * HOUR_HEIGHT
    height = max((end_hour - start_hour) * HOUR_HEIGHT, MIN_BLOCK_HEIGHT)
    return top, height


def build_week_view(
    reference: date,
    sessions: list[PhotoSession],
    assignments: list[SessionAssignment],
    photographers: list[Photographer],
    projects: list[Project],
    orders: list[Order],
    tz: tzinfo,
    start_hour: int,
    end_hour: int,
    photographer_id: uuid.UUID | None = None,
) -> WeekView:
    """
    Assemble the admin week calendar from plain entity lists.

    No I/O: every join goes through the index maps built here, so the
    function can be fed any consistent snapshot of the tables.
    """
    week_start, week_end = week_bounds(reference)

    photographers_by_id = {p.id: p for p in photographers}
    projects_by_id = {p.id: p for p in projects}
    orders_by_id = {o.id: o for o in orders}
    photographer_ids_by_session: dict[uuid.UUID, list[uuid.UUID]] = defaultdict(list)
    for assignment in assignments:
        photographer_ids_by_session[assignment.session_id].append(assignment.photographer_id)

    blocks_by_day: dict[date, list[CalendarBlock]] = {
        week_start + timedelta(days=i): [] for i in range(7)
    }
    stats = {status: 0 for status in SessionStatus}
    workload_count: dict[uuid.UUID, int] = defaultdict(int)
    workload_hours: dict[uuid.UUID, float] = defaultdict(float)

    for photo_session in sorted(sessions, key=lambda s: as_utc(s.start_at)):
        local_start = as_utc(photo_session.start_at).astimezone(tz)
        local_end = as_utc(photo_session.end_at).astimezone(tz)
        day = local_start.date()
        if day not in blocks_by_day:
            continue

        assigned_ids = photographer_ids_by_session.get(photo_session.id, [])
        if photographer_id is not None and photographer_id not in assigned_ids:
            continue

        crew = [
            CalendarPhotographer(id=pid, name=photographers_by_id[pid].name)
            for pid in assigned_ids
            if pid in photographers_by_id
        ]
        crew.sort(key=lambda p: p.name)

        project = projects_by_id.get(photo_session.project_id)
        order = orders_by_id.get(photo_session.order_id) if photo_session.order_id else None
        top, height = block_geometry(local_start, local_end)

        blocks_by_day[day].append(
            CalendarBlock(
                session_id=photo_session.id,
                project_id=photo_session.project_id,
                project_title=project.title if project else None,
                order_id=photo_session.order_id,
                customer_name=order.customer_name if order else None,
                start_at=local_start,
                end_at=local_end,
                location=photo_session.location,
                status=photo_session.status,
                photographers=crew,
                top=top,
                height=height,
            )
        )

        stats[photo_session.status] += 1
        if photo_session.status != SessionStatus.CANCELLED:
            hours = (local_end - local_start).total_seconds() / 3600
            for pid in assigned_ids:
                workload_count[pid] += 1
                workload_hours[pid] += hours

    workload = [
        PhotographerWorkload(
            photographer_id=p.id,
            name=p.name,
            session_count=workload_count.get(p.id, 0),
            hours=round(workload_hours.get(p.id, 0.0), 2),
        )
        for p in sorted(photographers, key=lambda p: p.name)
        if p.is_active and (photographer_id is None or p.id == photographer_id)
    ]

    return WeekView(
        timezone=str(tz),
        week_start=week_start,
        week_end=week_end,
        start_hour=start_hour,
        end_hour=end_hour,
        hour_height=HOUR_HEIGHT,
        days=[CalendarDay(date=d, blocks=blocks) for d, blocks in blocks_by_day.items()],
        stats=WeekStats(
            total=sum(stats.values()),
            planned=stats[SessionStatus.PLANNED],
            confirmed=stats[SessionStatus.CONFIRMED],
            done=stats[SessionStatus.DONE],
            cancelled=stats[SessionStatus.CANCELLED],
        ),
        workload=workload,
    )


class CalendarService:
    """
    Loads one week of scheduling data and hands it to build_week_view.
    """

    def __init__(self, repo: SchedulingRepository, settings_service: SettingsService):
        self.repo = repo
        self.settings_service = settings_service

    def week(
        self,
        session: Session,
        reference: date,
        photographer_id: uuid.UUID | None = None,
    ) -> WeekView:
        tz = display_tz()
        week_start, week_end = week_bounds(reference)
        range_start = datetime.combine(week_start, time.min, tzinfo=tz)
        range_end = datetime.combine(week_end + timedelta(days=1), time.min, tzinfo=tz)

        sessions = self.repo.list_sessions(
            session,
            starts_after=as_utc(range_start),
            ends_before=as_utc(range_end),
        )
        session_ids = {s.id for s in sessions}
        assignments = [
            a for a in self.repo.list_assignments(session) if a.session_id in session_ids
        ]

        project_ids = {s.project_id for s in sessions}
        order_ids = {s.order_id for s in sessions if s.order_id}
        projects = [p for p in (session.get(Project, pid) for pid in project_ids) if p]
        orders = [o for o in (session.get(Order, oid) for oid in order_ids) if o]

        app_settings = self.settings_service.get_or_create(session)

        return build_week_view(
            reference,
            sessions=sessions,
            assignments=assignments,
            photographers=self.repo.list_photographers(session),
            projects=projects,
            orders=orders,
            tz=tz,
            start_hour=app_settings.calendar_start_hour,
            end_hour=app_settings.calendar_end_hour,
            photographer_id=photographer_id,
        )


def default_reference_date() -> date:
    return datetime.now(display_tz()).date()


