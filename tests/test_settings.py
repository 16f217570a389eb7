# tests/test_settings.py


def test_defaults_created_on_first_read(client):
    resp = client.get("/api/settings/app")
    assert resp.status_code == 200
    body = resp.json()
    assert body["calendar_start_hour"] == 6
    assert body["calendar_end_hour"] == 20
    assert body["timezone"] == "Asia/Jakarta"


def test_admin_can_update_hours(client, admin_headers):
    resp = client.patch(
        "/api/settings/app",
        json={"calendar_start_hour": 8},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["calendar_start_hour"] == 8
    assert resp.json()["calendar_end_hour"] == 20


def test_start_must_precede_end(client, admin_headers):
    resp = client.patch(
        "/api/settings/app",
        json={"calendar_start_hour": 20, "calendar_end_hour": 8},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["field"] == "calendar_end_hour"

    resp = client.patch(
        "/api/settings/app",
        json={"calendar_end_hour": 24},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_update_requires_admin(client, staff_headers):
    resp = client.patch(
        "/api/settings/app",
        json={"calendar_start_hour": 8},
        headers=staff_headers,
    )
    assert resp.status_code == 403
