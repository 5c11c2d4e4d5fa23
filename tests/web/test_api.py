from __future__ import annotations

import pytest

from conftest import ANNUAL, APP_TZ, EMPLOYEE_ID, HR_ID, OFFICE, OTHER_EMPLOYEE_ID, login
from hr_workflow.container import wire
from hr_workflow.core.enums import Role
from hr_workflow.core.exceptions import PersistenceError


def _submit(client, **overrides):
    body = {
        "leave_type_id": ANNUAL,
        "start_date": "2025-12-22",
        "end_date": "2025-12-23",
        "day_type": "full",
        "total_days": 2,
        "reason": "Family trip",
    }
    body.update(overrides)
    return client.post("/api/leaves", json=body)


def test_requires_login(client):
    resp = client.get("/api/attendance/today")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_check_in_and_out(client, clock):
    login(client, EMPLOYEE_ID)
    clock.set_local(2025, 12, 15, 9, 0, 30)

    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["check_in_status"] == "ontime"

    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "already_checked_in"

    clock.set_local(2025, 12, 15, 19, 30, 30)
    body = client.post("/api/attendance/check-out").get_json()
    assert body["attendance"]["check_out_status"] == "overtime"
    assert body["attendance"]["total_hours"] == 10.5

    today = client.get("/api/attendance/today").get_json()
    assert today["date"] == "2025-12-15"
    assert today["timezone"] == "Asia/Jakarta"
    assert today["attendance"]["check_out_status"] == "overtime"

    history = client.get("/api/attendance/history?limit=5").get_json()
    assert len(history["items"]) == 1


def test_check_out_without_check_in(client):
    login(client, EMPLOYEE_ID)
    resp = client.post("/api/attendance/check-out")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "no_check_in_found"


def test_history_limit_validation(client):
    login(client, EMPLOYEE_ID)
    assert client.get("/api/attendance/history?limit=abc").status_code == 400
    assert client.get("/api/attendance/history?limit=0").status_code == 400


def test_leave_flow_over_http(client, balances):
    balances.put(EMPLOYEE_ID, ANNUAL, 2025, allocated=10)
    login(client, EMPLOYEE_ID)

    resp = _submit(client)
    assert resp.status_code == 201
    request_id = resp.get_json()["request"]["request_id"]
    assert resp.get_json()["warnings"] == []

    conflict = _submit(client, start_date="2026-01-05", end_date="2026-01-05", total_days=1)
    assert conflict.status_code == 409
    body = conflict.get_json()
    assert body["error"] == "active_request_exists"
    assert (body["request_id"], body["status"]) == (request_id, "pending")

    assert client.get("/api/leaves/active").get_json()["request"]["request_id"] == request_id
    assert client.post(f"/api/hr/leaves/{request_id}/approve").status_code == 403

    login(client, HR_ID, Role.HR_ADMIN)
    assert client.get("/api/hr/leaves/pending/count").get_json() == {"count": 1}
    pending = client.get("/api/hr/leaves/pending").get_json()["items"]
    assert pending[0]["request_id"] == request_id

    approved = client.post(f"/api/hr/leaves/{request_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["request"]["status"] == "approved"

    again = client.post(f"/api/hr/leaves/{request_id}/approve")
    assert again.status_code == 409
    assert again.get_json()["error"] == "invalid_transition"

    login(client, EMPLOYEE_ID)
    balances_body = client.get("/api/leaves/balances?year=2025").get_json()
    annual = [b for b in balances_body["items"] if b["leave_type_id"] == ANNUAL][0]
    assert (annual["allocated"], annual["used"], annual["remaining"]) == (10.0, 2.0, 8.0)

    inbox = client.get("/api/notifications").get_json()["items"]
    assert [n["kind"] for n in inbox] == ["leave_approved", "leave_sent"]
    assert client.get("/api/notifications/unread-count").get_json() == {"count": 2}


def test_reject_needs_reason(client):
    login(client, EMPLOYEE_ID)
    request_id = _submit(client).get_json()["request"]["request_id"]

    login(client, HR_ID, Role.HR_ADMIN)
    resp = client.post(f"/api/hr/leaves/{request_id}/reject", json={"reason": "   "})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "missing_reason"

    resp = client.post(f"/api/hr/leaves/{request_id}/reject", json={"reason": "Year-end freeze"})
    assert resp.get_json()["request"]["rejection_reason"] == "Year-end freeze"


def test_approval_reports_missing_balance_as_warning(client):
    login(client, EMPLOYEE_ID)
    request_id = _submit(client).get_json()["request"]["request_id"]

    login(client, HR_ID, Role.HR_ADMIN)
    body = client.post(f"/api/hr/leaves/{request_id}/approve").get_json()
    assert body["success"] is True
    assert [w["effect"] for w in body["warnings"]] == ["leave_balance"]


def test_request_visibility_and_cancel(client):
    login(client, EMPLOYEE_ID)
    request_id = _submit(client).get_json()["request"]["request_id"]

    login(client, OTHER_EMPLOYEE_ID)
    assert client.get(f"/api/leaves/{request_id}").status_code == 403
    assert client.post(f"/api/leaves/{request_id}/cancel").status_code == 409
    assert client.get("/api/leaves/999").status_code == 404

    login(client, EMPLOYEE_ID)
    assert client.get(f"/api/leaves/{request_id}").status_code == 200
    resp = client.post(f"/api/leaves/{request_id}/cancel")
    assert resp.get_json()["request"]["status"] == "cancelled"
    assert client.get("/api/leaves/mine").get_json()["items"][0]["status"] == "cancelled"


def test_submit_validation_errors(client):
    login(client, EMPLOYEE_ID)
    assert client.post("/api/leaves", json={}).status_code == 400
    resp = _submit(client, start_date="2025-12-23", end_date="2025-12-22")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_notification_endpoints(client, container):
    container.notification_service.notify_announcement([EMPLOYEE_ID], 1, "Town hall at 3pm")
    login(client, EMPLOYEE_ID)

    item = client.get("/api/notifications?unread=1").get_json()["items"][0]
    assert client.post(f"/api/notifications/{item['notification_id']}/read").status_code == 200
    assert client.post("/api/notifications/999/read").status_code == 404
    assert client.post("/api/notifications/read-all").get_json() == {"success": True, "updated": 0}
    assert client.delete(f"/api/notifications/{item['notification_id']}").status_code == 200
    assert client.get("/api/notifications").get_json()["items"] == []


def test_persistence_errors_become_500(client, attendance_repo, monkeypatch):
    def broken(*args, **kwargs):
        raise PersistenceError("Database operation failed")

    monkeypatch.setattr(attendance_repo, "get_for_employee_and_date", broken)
    login(client, EMPLOYEE_ID)

    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "persistence_error"


def test_cancelling_a_decided_request_is_a_conflict(client):
    login(client, EMPLOYEE_ID)
    request_id = _submit(client).get_json()["request"]["request_id"]

    login(client, HR_ID, Role.HR_ADMIN)
    client.post(f"/api/hr/leaves/{request_id}/reject", json={"reason": "Year-end freeze"})

    login(client, EMPLOYEE_ID)
    resp = client.post(f"/api/leaves/{request_id}/cancel")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "invalid_transition"
    assert resp.get_json()["status"] == "rejected"


def test_non_finite_total_days_is_rejected(client):
    login(client, EMPLOYEE_ID)
    for value in ("NaN", "Infinity"):
        resp = _submit(client, total_days=value)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"


def test_non_text_reasons_are_rejected(client):
    login(client, EMPLOYEE_ID)
    assert _submit(client, reason=["trip"]).status_code == 400
    request_id = _submit(client).get_json()["request"]["request_id"]

    login(client, HR_ID, Role.HR_ADMIN)
    resp = client.post(f"/api/hr/leaves/{request_id}/reject", json={"reason": 123})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"
    assert client.get(f"/api/leaves/{request_id}").get_json()["request"]["status"] == "pending"


@pytest.fixture
def geofenced_client(
    monkeypatch, clock, employees, attendance_repo, leave_types, balances, leave_requests, notifications, office_locations
):
    from hr_workflow.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    container = wire(
        employees_repo=employees,
        attendance_repo=attendance_repo,
        leave_types_repo=leave_types,
        leave_balances_repo=balances,
        leave_requests_repo=leave_requests,
        notifications_repo=notifications,
        office_locations_repo=office_locations,
        app_timezone=APP_TZ,
        geofence_enabled=True,
        clock=clock,
    )
    return create_app(container).test_client()


def test_check_in_outside_radius_over_http(geofenced_client):
    client = geofenced_client
    login(client, EMPLOYEE_ID)

    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "location_required"

    resp = client.post("/api/attendance/check-in", json={"latitude": OFFICE[0] + 0.001, "longitude": OFFICE[1]})
    body = resp.get_json()
    assert resp.status_code == 400
    assert body["error"] == "outside_check_in_radius"
    assert (body["distance_meters"], body["radius_meters"]) == (111, 50)

    resp = client.post("/api/attendance/check-in", json={"latitude": OFFICE[0], "longitude": OFFICE[1], "accuracy": 5})
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["check_in_location_id"] == 1
