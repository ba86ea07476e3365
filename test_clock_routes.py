#!/usr/bin/env python3
"""
End-to-end checks of the HTTP surface with the auth dependency replaced
by fixed session contexts and the database by in-memory SQLite.
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from conftest import FAR_POINT, OFFICE_POINT
from core.deps import get_current_user
from db.session import get_session
from main import app


@pytest.fixture
def as_user(engine):
    """Returns a function that points the app at a given SessionContext."""

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session

    def login(context):
        app.dependency_overrides[get_current_user] = lambda: context
        return TestClient(app)

    yield login
    app.dependency_overrides.clear()


def test_worker_clock_in_and_out_flow(as_user, office, worker):
    client = as_user(worker)

    check = client.get("/time/location-check", params={"lat": OFFICE_POINT[0], "lng": OFFICE_POINT[1]})
    assert check.status_code == 200
    assert check.json()["status"] == "within"
    assert check.json()["matched"]["name"] == "Office"

    response = client.post(
        "/time/clock-in",
        json={"latitude": OFFICE_POINT[0], "longitude": OFFICE_POINT[1], "note": "Morning shift"},
    )
    assert response.status_code == 200
    record = response.json()
    assert record["clock_out_timestamp"] is None
    assert record["duration"] == "-"
    assert record["clock_in_timestamp"].endswith("Z")

    open_session = client.get("/time/open-session").json()
    assert open_session["is_clocked_in"]
    assert open_session["data"]["id"] == record["id"]

    response = client.post(
        "/clock-out",
        params={"id": record["id"]},
        json={"clock_out_location": {"lat": 51.509, "lng": -0.129}, "clock_out_note": "Done"},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert client.get("/time/open-session").json() == {"is_clocked_in": False, "data": None}

    history = client.get("/time/history").json()
    assert len(history) == 1
    assert history[0]["clock_out_note"] == "Done"
    assert history[0]["clock_in_note"] == "Morning shift"
    assert history[0]["duration"] == "0h 0m"


def test_clock_in_rejections(as_user, worker):
    client = as_user(worker)

    # No perimeters yet: indeterminate, still a rejection
    check = client.get("/time/location-check", params={"lat": OFFICE_POINT[0], "lng": OFFICE_POINT[1]})
    assert check.json()["status"] == "indeterminate"
    response = client.post("/time/clock-in", json={"latitude": OFFICE_POINT[0], "longitude": OFFICE_POINT[1]})
    assert response.status_code == 400

    response = client.post("/time/clock-in", json={"location_error": "User denied Geolocation"})
    assert response.status_code == 400
    assert "location" in response.json()["detail"].lower()


def test_clock_in_outside_perimeter(as_user, office, worker):
    client = as_user(worker)

    response = client.post("/time/clock-in", json={"latitude": FAR_POINT[0], "longitude": FAR_POINT[1]})

    assert response.status_code == 400
    assert client.get("/time/history").json() == []


def test_double_clock_in_conflicts(as_user, office, worker):
    client = as_user(worker)
    body = {"latitude": OFFICE_POINT[0], "longitude": OFFICE_POINT[1]}

    assert client.post("/time/clock-in", json=body).status_code == 200
    assert client.post("/time/clock-in", json=body).status_code == 409


def test_clock_out_error_codes(as_user, office, worker, other_worker):
    client = as_user(worker)
    record = client.post(
        "/time/clock-in", json={"latitude": OFFICE_POINT[0], "longitude": OFFICE_POINT[1]}
    ).json()

    assert client.post("/clock-out").status_code == 400
    assert client.post("/clock-out", params={"id": "nope"}).status_code == 404

    intruder = as_user(other_worker)
    assert intruder.post("/clock-out", params={"id": record["id"]}).status_code == 403

    client = as_user(worker)
    assert client.post("/clock-out", params={"id": record["id"]}).status_code == 200
    assert client.post("/clock-out", params={"id": record["id"]}).status_code == 409


def test_roles_gate_routes(as_user, manager, worker):
    manager_client = as_user(manager)
    assert manager_client.post("/time/clock-in", json={}).status_code == 403

    worker_client = as_user(worker)
    assert worker_client.get("/admin/analytics/summary").status_code == 403
    assert worker_client.post(
        "/admin/perimeters",
        json={"name": "Depot", "center_lat": 51.5, "center_lng": -0.1, "radius_km": 1},
    ).status_code == 403


def test_manager_perimeter_management(as_user, manager, worker):
    client = as_user(manager)

    response = client.post(
        "/admin/perimeters",
        json={"name": "Depot", "center_lat": 51.5, "center_lng": -0.1, "radius_km": 1.5},
    )
    assert response.status_code == 201
    perimeter = response.json()
    assert perimeter["id"]

    assert client.post(
        "/admin/perimeters",
        json={"name": "Bad", "center_lat": 51.5, "center_lng": -0.1, "radius_km": 0},
    ).status_code == 422

    # Workers can read perimeters too
    listed = as_user(worker).get("/perimeters").json()
    assert [p["name"] for p in listed] == ["Depot"]

    client = as_user(manager)
    assert client.delete(f"/admin/perimeters/{perimeter['id']}").status_code == 200
    assert client.delete(f"/admin/perimeters/{perimeter['id']}").status_code == 404
    assert client.get("/perimeters").json() == []


def test_manager_dashboard_endpoints(as_user, office, manager, worker, other_worker):
    body = {"latitude": OFFICE_POINT[0], "longitude": OFFICE_POINT[1]}
    record = as_user(worker).post("/time/clock-in", json=body).json()
    as_user(worker).post("/clock-out", params={"id": record["id"]})
    as_user(other_worker).post("/time/clock-in", json=body)

    client = as_user(manager)

    summary = client.get("/admin/analytics/summary").json()
    assert summary["active_staff"] == 1
    assert summary["total_hours_today"] >= 0

    series = client.get("/admin/analytics/daily-clock-ins", params={"days": 7}).json()
    assert len(series["points"]) == 7
    assert series["points"][-1]["value"] == 2

    assert len(client.get("/admin/analytics/daily-avg-hours", params={"days": 30}).json()["points"]) == 30

    top = client.get("/admin/analytics/top-staff", params={"window_days": 7}).json()
    assert [staff["name"] for staff in top["staff"]] == ["Ada Lovelace"]

    active = client.get("/admin/analytics/records", params={"status": "active"}).json()
    assert [r["worker_display_name"] for r in active] == ["Grace Hopper"]

    assert client.get("/admin/analytics/daily-clock-ins", params={"days": 0}).status_code == 422


def test_clock_in_rejects_out_of_range_coordinates(as_user, office, worker):
    client = as_user(worker)

    assert client.post("/time/clock-in", json={"latitude": 200, "longitude": -0.13}).status_code == 422
    assert client.post("/time/clock-in", json={"latitude": 51.51, "longitude": -181}).status_code == 422
    assert client.get("/time/history").json() == []
