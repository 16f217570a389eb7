# tests/test_projects.py
import uuid
from datetime import datetime, timezone

from sqlmodel import select

from app.models.project import ProjectImage
from app.models.scheduling import PhotoSession
from app.services.project_service import MAX_PROJECT_IMAGES


def _create_project(client, headers, **overrides):
    payload = {"title": "Rani & Dimas Wedding", "is_published": True}
    payload.update(overrides)
    return client.post("/api/projects", json=payload, headers=headers)


def test_slug_is_generated_and_unique(client, admin_headers):
    first = _create_project(client, admin_headers).json()
    second = _create_project(client, admin_headers).json()

    assert first["slug"] == "rani-dimas-wedding"
    assert second["slug"] == "rani-dimas-wedding-2"

    resp = client.get(f"/api/projects/{second['slug']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == second["id"]


def test_unpublished_projects_hidden_from_public(client, admin_headers):
    draft = _create_project(client, admin_headers, title="Draft", is_published=False).json()
    _create_project(client, admin_headers, title="Live")

    public = client.get("/api/projects").json()
    assert [p["title"] for p in public] == ["Live"]
    assert client.get(f"/api/projects/{draft['id']}").status_code == 404

    admin = client.get("/api/projects", headers=admin_headers).json()
    assert {p["title"] for p in admin} == {"Draft", "Live"}
    drafts = client.get("/api/projects", params={"published": False}, headers=admin_headers).json()
    assert [p["title"] for p in drafts] == ["Draft"]


def test_search_and_category_filter(client, admin_headers, wedding):
    _create_project(client, admin_headers, title="Sunset Prewedding", client_name="Ayu")
    _create_project(client, admin_headers, title="Graduation", category_id=str(wedding.id))

    found = client.get("/api/projects", params={"search": "ayu"}).json()
    assert [p["title"] for p in found] == ["Sunset Prewedding"]

    by_category = client.get("/api/projects", params={"category_id": str(wedding.id)}).json()
    assert [p["title"] for p in by_category] == ["Graduation"]


def test_gallery_cap_and_ordering(client, admin_headers):
    project = _create_project(client, admin_headers).json()
    url = f"/api/projects/{project['id']}/images"

    for i in range(MAX_PROJECT_IMAGES):
        resp = client.post(url, json={"url": f"https://cdn.example.org/{i}.jpg"}, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.json()["sort_order"] == i

    resp = client.post(url, json={"url": "https://cdn.example.org/extra.jpg"}, headers=admin_headers)
    assert resp.status_code == 400

    images = client.get(url).json()
    assert len(images) == MAX_PROJECT_IMAGES

    last = images[-1]
    resp = client.patch(
        f"/api/project-images/{last['id']}",
        json={"sort_order": 0, "caption": "Cover"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["caption"] == "Cover"

    resp = client.delete(f"/api/project-images/{images[0]['id']}", headers=admin_headers)
    assert resp.status_code == 204
    assert len(client.get(url).json()) == MAX_PROJECT_IMAGES - 1


def test_delete_project_removes_images_only_for_that_project(
    client, admin_headers, session, make_session
):
    doomed = _create_project(client, admin_headers, title="Doomed").json()
    kept = _create_project(client, admin_headers, title="Kept").json()
    for project in (doomed, kept):
        client.post(
            f"/api/projects/{project['id']}/images",
            json={"url": "https://cdn.example.org/a.jpg"},
            headers=admin_headers,
        )
    other = make_session(
        datetime(2026, 10, 20, 3, tzinfo=timezone.utc),
        datetime(2026, 10, 20, 5, tzinfo=timezone.utc),
        project_id=uuid.UUID(kept["id"]),
    )

    resp = client.delete(f"/api/projects/{doomed['id']}", headers=admin_headers)
    assert resp.status_code == 204

    images = session.exec(select(ProjectImage)).all()
    assert [str(i.project_id) for i in images] == [kept["id"]]
    assert session.get(PhotoSession, other.id) is not None
    assert client.get(f"/api/projects/{doomed['id']}", headers=admin_headers).status_code == 404


def test_project_with_sessions_cannot_be_deleted(client, admin_headers, project, make_session):
    make_session(
        datetime(2026, 10, 20, 3, tzinfo=timezone.utc),
        datetime(2026, 10, 20, 5, tzinfo=timezone.utc),
    )
    resp = client.delete(f"/api/projects/{project.id}", headers=admin_headers)
    assert resp.status_code == 400


def test_project_writes_need_admin(client, staff_headers):
    assert _create_project(client, {}).status_code == 401
    assert _create_project(client, staff_headers).status_code == 403
