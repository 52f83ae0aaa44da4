from __future__ import annotations

import pytest

from src.hr_console.hr_console.main import create_app


@pytest.fixture
def app():
    return create_app("config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id


def submit_vacation(client, user_id="u4", **overrides):
    login(client, user_id)
    body = {"leave_type": "Vacation", "start_date": "2026-03-02", "end_date": "2026-03-04", "reason": "Family trip"}
    body.update(overrides)
    return client.post("/api/leaves", json=body)


def test_requires_login(client):
    assert client.get("/api/leaves/pending").status_code == 401
    assert client.post("/api/leaves", json={}).status_code == 401


def test_submit_uses_requester_department_chain(client):
    resp = submit_vacation(client, "u4")
    assert resp.status_code == 201

    data = resp.get_json()
    assert data["department_code"] == "HR"
    assert data["approval_chain"] == ["OM", "DM", "CEO"]
    assert data["current_approver_role"] == "OM"
    assert data["status"] == "PENDING"
    assert data["days"] == 3
    assert [s["state"] for s in data["timeline"]] == ["PENDING", "WAITING", "WAITING"]


def test_submit_validation_errors(client):
    resp = submit_vacation(client, start_date="2026-03-05", end_date="2026-03-01")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "ValidationError"

    resp = submit_vacation(client, start_date="03/05/2026")
    assert resp.status_code == 400

    login(client, "u4")
    resp = client.post("/api/leaves", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_full_approval_round_trip(client):
    request_id = submit_vacation(client, "u4").get_json()["id"]

    login(client, "u3")  # DM cannot act on the OM step
    resp = client.post(f"/api/leaves/{request_id}/approve")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "NotAuthorizedError"
    assert client.get("/api/leaves/pending").get_json()["items"] == []

    login(client, "u1")  # superuser
    assert [r["id"] for r in client.get("/api/leaves/pending").get_json()["items"]] == [request_id]
    resp = client.post(f"/api/leaves/{request_id}/approve", json={"note": "ok from OM step"})
    assert resp.status_code == 200
    assert resp.get_json()["current_approver_role"] == "DM"

    login(client, "u3")
    assert [r["id"] for r in client.get("/api/leaves/pending").get_json()["items"]] == [request_id]
    assert client.post(f"/api/leaves/{request_id}/approve").get_json()["current_approver_role"] == "CEO"

    login(client, "u1")
    data = client.post(f"/api/leaves/{request_id}/approve").get_json()
    assert data["status"] == "APPROVED"
    assert data["current_approver_role"] == "DONE"
    assert [a["role"] for a in data["approvals"]] == ["OM", "DM", "CEO"]
    assert data["approvals"][0]["note"] == "ok from OM step"

    resp = client.post(f"/api/leaves/{request_id}/reject")
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "AlreadyFinalizedError"


def test_reject_stops_chain(client):
    request_id = submit_vacation(client, "u4").get_json()["id"]

    login(client, "u1")
    data = client.post(f"/api/leaves/{request_id}/reject", json={"note": "Peak season"}).get_json()
    assert data["status"] == "REJECTED"
    assert [s["state"] for s in data["timeline"]] == ["REJECTED", "WAITING", "WAITING"]


def test_decide_unknown_request(client):
    login(client, "u1")
    resp = client.post("/api/leaves/nope/approve")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "LeaveRequestNotFoundError"


def test_my_leaves_and_detail_access(client):
    request_id = submit_vacation(client, "u4").get_json()["id"]
    submit_vacation(client, "u4", start_date="2026-04-01", end_date="2026-04-01")

    login(client, "u4")
    mine = client.get("/api/leaves/mine").get_json()["items"]
    assert [r["start_date"] for r in mine] == ["2026-04-01", "2026-03-02"]
    assert client.get(f"/api/leaves/{request_id}").status_code == 200

    login(client, "u2")
    assert client.get("/api/leaves/mine").get_json()["items"] == []
    assert client.get(f"/api/leaves/{request_id}").status_code == 403

    login(client, "u3")  # DM sits on the chain
    assert client.get(f"/api/leaves/{request_id}").status_code == 200


def test_history_search_is_limited_to_hr_and_admin(client):
    submit_vacation(client, "u4")
    submit_vacation(client, "u2", leave_type="Sick Leave", reason="Fever")

    login(client, "u2")
    assert client.get("/api/leaves").status_code == 403

    login(client, "u4")
    data = client.get("/api/leaves", query_string={"q": "somsak"}).get_json()
    assert [r["requester_id"] for r in data["items"]] == ["u2"]
    assert data["items"][0]["requester_name"] == "Somsak Khayan"

    data = client.get("/api/leaves", query_string={"type": "ALL", "status": "PENDING"}).get_json()
    assert len(data["items"]) == 2
    assert data["counts"] == {"PENDING": 2, "APPROVED": 0, "REJECTED": 0}

    assert client.get("/api/leaves", query_string={"status": "bogus"}).status_code == 400


def test_purge(client):
    request_id = submit_vacation(client, "u4").get_json()["id"]

    login(client, "u2")
    assert client.delete(f"/api/leaves/{request_id}").status_code == 403

    login(client, "u4")
    assert client.delete(f"/api/leaves/{request_id}").status_code == 204
    assert client.delete(f"/api/leaves/{request_id}").status_code == 404
    assert client.get("/api/leaves/mine").get_json()["items"] == []


def test_audit_log_endpoint(client):
    request_id = submit_vacation(client, "u4").get_json()["id"]
    login(client, "u1")
    client.post(f"/api/leaves/{request_id}/approve")

    login(client, "u4")
    assert client.get("/api/audit-logs").status_code == 403

    login(client, "u1")
    items = client.get("/api/audit-logs").get_json()["items"]
    assert [(e["user_id"], e["action"]) for e in items] == [("u1", "APPROVE_LEAVE"), ("u4", "LEAVE_REQUEST")]
    assert items[0]["details"] == f"Leave ID {request_id} decision made."


def test_decision_body_must_be_an_object(client):
    request_id = submit_vacation(client, "u4").get_json()["id"]

    login(client, "u1")
    for body in (["note"], "looks fine", 7):
        resp = client.post(f"/api/leaves/{request_id}/approve", json=body)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "ValidationError"

    login(client, "u4")
    assert client.get(f"/api/leaves/{request_id}").get_json()["current_approver_role"] == "OM"


def test_departments_lists_approval_chains(client):
    assert client.get("/api/departments").status_code == 401

    login(client, "u2")
    items = client.get("/api/departments").get_json()["items"]

    codes = [d["code"] for d in items]
    assert codes == sorted(codes)
    prod = next(d for d in items if d["code"] == "PROD")
    assert prod["approval_chain"] == ["FM", "SUP", "PM", "DM"]
