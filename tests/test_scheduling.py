# tests/test_scheduling.py
from datetime import datetime, timezone

import pytest
from sqlalchemy import func
from sqlmodel import Session, select

from app.core.errors import SchedulingConflict
from app.models.scheduling import PhotoSession, SessionAssignment
from app.repositories.scheduling_repo import SchedulingRepository
from app.schemas.scheduling import SessionUpdate
from app.services.scheduling_service import SchedulingService


def _count_assignments(session) -> int:
    return session.exec(select(func.count()).select_from(SessionAssignment)).one()


def _create_session(client, headers, project, start: str, end: str):
    return client.post(
        "/api/sessions",
        json={"project_id": str(project.id), "start_at": start, "end_at": end},
        headers=headers,
    )


def _assign(client, headers, session_id, photographer_id):
    return client.post(
        f"/api/sessions/{session_id}/assign",
        json={"photographer_id": str(photographer_id)},
        headers=headers,
    )


def test_scheduling_requires_admin(client, staff_headers, project):
    resp = _create_session(
        client, staff_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00"
    )
    assert resp.status_code == 403

    resp = client.get("/api/sessions")
    assert resp.status_code == 401


def test_naive_times_are_studio_local(client, admin_headers, project):
    resp = _create_session(
        client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00"
    )
    assert resp.status_code == 201
    body = resp.json()
    # Asia/Jakarta is UTC+7
    start = datetime.fromisoformat(body["start_at"].replace("Z", "+00:00"))
    assert start == datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)


def test_end_before_start_rejected(client, admin_headers, project):
    resp = _create_session(
        client, admin_headers, project, "2026-10-20T12:00:00", "2026-10-20T10:00:00"
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "end_at"

    resp = _create_session(
        client, admin_headers, project, "2026-10-20T12:00:00", "2026-10-20T12:00:00"
    )
    assert resp.status_code == 400


def test_session_for_unknown_project_is_404(client, admin_headers):
    resp = client.post(
        "/api/sessions",
        json={
            "project_id": "00000000-0000-4000-8000-000000000000",
            "start_at": "2026-10-20T10:00:00",
            "end_at": "2026-10-20T12:00:00",
        },
        headers=admin_headers,
    )
    assert resp.status_code == 404


def test_double_booking_is_a_conflict_and_touching_is_fine(
    client, admin_headers, session, project, make_photographer
):
    photographer = make_photographer("Bayu")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()
    b = _create_session(client, admin_headers, project, "2026-10-20T11:00:00", "2026-10-20T13:00:00").json()
    c = _create_session(client, admin_headers, project, "2026-10-20T12:00:00", "2026-10-20T13:00:00").json()

    assert _assign(client, admin_headers, a["id"], photographer.id).status_code == 201

    before = _count_assignments(session)
    resp = _assign(client, admin_headers, b["id"], photographer.id)
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["code"] == "scheduling_conflict"
    assert detail["conflicting_session_ids"] == [a["id"]]
    assert _count_assignments(session) == before

    resp = _assign(client, admin_headers, c["id"], photographer.id)
    assert resp.status_code == 201
    assert _count_assignments(session) == before + 1


def test_other_photographer_can_take_overlapping_session(
    client, admin_headers, project, make_photographer
):
    bayu = make_photographer("Bayu")
    sekar = make_photographer("Sekar")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()
    b = _create_session(client, admin_headers, project, "2026-10-20T11:00:00", "2026-10-20T13:00:00").json()

    assert _assign(client, admin_headers, a["id"], bayu.id).status_code == 201
    assert _assign(client, admin_headers, b["id"], sekar.id).status_code == 201


def test_inactive_and_duplicate_assignments_rejected(
    client, admin_headers, project, make_photographer
):
    retired = make_photographer("Retired", is_active=False)
    bayu = make_photographer("Bayu")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()

    assert _assign(client, admin_headers, a["id"], retired.id).status_code == 400

    assert _assign(client, admin_headers, a["id"], bayu.id).status_code == 201
    resp = _assign(client, admin_headers, a["id"], bayu.id)
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "photographer_id"


def test_reschedule_into_overlap_is_a_conflict(
    client, admin_headers, project, make_photographer
):
    bayu = make_photographer("Bayu")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()
    c = _create_session(client, admin_headers, project, "2026-10-20T12:00:00", "2026-10-20T13:00:00").json()
    _assign(client, admin_headers, a["id"], bayu.id)
    _assign(client, admin_headers, c["id"], bayu.id)

    resp = client.patch(
        f"/api/sessions/{c['id']}",
        json={"start_at": "2026-10-20T11:30:00"},
        headers=admin_headers,
    )
    assert resp.status_code == 409

    # unchanged
    detail = client.get(f"/api/sessions/{c['id']}", headers=admin_headers).json()
    start = datetime.fromisoformat(detail["start_at"].replace("Z", "+00:00"))
    assert start == datetime(2026, 10, 20, 5, 0, tzinfo=timezone.utc)
    assert [p["name"] for p in detail["photographers"]] == ["Bayu"]

    resp = client.patch(
        f"/api/sessions/{c['id']}",
        json={"start_at": "2026-10-20T14:00:00", "end_at": "2026-10-20T15:00:00"},
        headers=admin_headers,
    )
    assert resp.status_code == 200


def test_unassign_and_delete_session(client, admin_headers, session, project, make_photographer):
    bayu = make_photographer("Bayu")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()
    assignment = _assign(client, admin_headers, a["id"], bayu.id).json()

    listed = client.get(
        "/api/session-assignments",
        params={"photographer_id": str(bayu.id)},
        headers=admin_headers,
    ).json()
    assert [x["id"] for x in listed] == [assignment["id"]]

    resp = client.delete(f"/api/session-assignments/{assignment['id']}", headers=admin_headers)
    assert resp.status_code == 204
    resp = client.delete(f"/api/session-assignments/{assignment['id']}", headers=admin_headers)
    assert resp.status_code == 404

    _assign(client, admin_headers, a["id"], bayu.id)
    resp = client.delete(f"/api/sessions/{a['id']}", headers=admin_headers)
    assert resp.status_code == 204
    assert _count_assignments(session) == 0
    assert client.get(f"/api/sessions/{a['id']}", headers=admin_headers).status_code == 404


def test_photographer_with_history_cannot_be_deleted(
    client, admin_headers, project, make_photographer
):
    bayu = make_photographer("Bayu")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()
    _assign(client, admin_headers, a["id"], bayu.id)

    resp = client.delete(f"/api/photographers/{bayu.id}", headers=admin_headers)
    assert resp.status_code == 400

    resp = client.patch(
        f"/api/photographers/{bayu.id}",
        json={"is_active": False},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    active = client.get("/api/photographers", params={"active": True}, headers=admin_headers)
    assert active.json() == []


def test_list_sessions_filters_by_photographer_and_range(
    client, admin_headers, project, make_photographer
):
    bayu = make_photographer("Bayu")
    a = _create_session(client, admin_headers, project, "2026-10-20T10:00:00", "2026-10-20T12:00:00").json()
    _create_session(client, admin_headers, project, "2026-10-27T10:00:00", "2026-10-27T12:00:00")
    _assign(client, admin_headers, a["id"], bayu.id)

    by_photographer = client.get(
        "/api/sessions", params={"photographer_id": str(bayu.id)}, headers=admin_headers
    ).json()
    assert [s["id"] for s in by_photographer] == [a["id"]]

    in_range = client.get(
        "/api/sessions",
        params={"starts_after": "2026-10-26T00:00:00", "ends_before": "2026-10-28T00:00:00"},
        headers=admin_headers,
    ).json()
    assert len(in_range) == 1
    assert in_range[0]["id"] != a["id"]


def test_assign_sees_reschedule_committed_by_another_transaction(
    engine, session, make_photographer, make_session
):
    service = SchedulingService(SchedulingRepository())
    bayu = make_photographer("Bayu")
    busy = make_session(
        datetime(2026, 10, 20, 14, tzinfo=timezone.utc),
        datetime(2026, 10, 20, 16, tzinfo=timezone.utc),
    )
    session.add(SessionAssignment(session_id=busy.id, photographer_id=bayu.id))
    session.commit()
    moving = make_session(
        datetime(2026, 10, 20, 10, tzinfo=timezone.utc),
        datetime(2026, 10, 20, 12, tzinfo=timezone.utc),
    )

    with Session(engine) as assigner, Session(engine) as rescheduler:
        # assigner has already loaded the 10:00-12:00 range
        assert assigner.get(PhotoSession, moving.id).end_at.hour == 12

        service.update_session(
            rescheduler,
            moving.id,
            SessionUpdate(
                start_at=datetime(2026, 10, 20, 15, tzinfo=timezone.utc),
                end_at=datetime(2026, 10, 20, 17, tzinfo=timezone.utc),
            ),
        )

        with pytest.raises(SchedulingConflict) as exc_info:
            service.assign_photographer(assigner, moving.id, bayu.id)

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail["conflicting_session_ids"] == [str(busy.id)]
    assert _count_assignments(session) == 1
