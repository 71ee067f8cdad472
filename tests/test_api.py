from __future__ import annotations

import pytest


@pytest.fixture
def admin(auth_header):
    return auth_header(1)


@pytest.fixture
def scoped(auth_header):
    # user1 may only see employee 2
    return auth_header(2)


def submit(client, headers, **overrides):
    body = {"date": "2024-01-15", "employee_id": 2, "commission_project_id": 1, "commission_value": 150}
    body.update(overrides)
    return client.post("/api/v1/reports", json=body, headers=headers)


def test_login_then_profile(client):
    resp = client.post("/api/v1/login", json={"username": "user1", "password": "user123"})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["user"]["employee_scope"] == "2"
    assert "password_hash" not in data["user"]

    profile = client.get("/api/v1/profile", headers={"Authorization": f"Bearer {data['token']}"})
    assert profile.get_json()["data"]["username"] == "user1"


def test_bad_login_is_401(client):
    resp = client.post("/api/v1/login", json={"username": "user1", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"code": 401, "message": "invalid username or password"}


def test_requests_without_token_are_401(client):
    assert client.get("/api/v1/my-reports").status_code == 401
    bad = client.get("/api/v1/my-reports", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401


def test_admin_routes_reject_scoped_users(client, scoped):
    assert client.get("/api/v1/admin/companies", headers=scoped).status_code == 403


def test_admin_company_lifecycle(client, admin):
    created = client.post("/api/v1/admin/companies", json={"name": "Nanhu"}, headers=admin)
    assert created.status_code == 200
    company_id = created.get_json()["data"]["id"]

    listing = client.get("/api/v1/admin/companies?search=nan", headers=admin).get_json()["data"]
    assert [c["name"] for c in listing["companies"]] == ["Nanhu"]
    assert listing["total"] == 1

    toggled = client.put(f"/api/v1/admin/companies/{company_id}/toggle-status", headers=admin)
    assert toggled.get_json()["data"]["status"] == 0

    assert client.delete(f"/api/v1/admin/companies/{company_id}", headers=admin).status_code == 200
    assert client.get(f"/api/v1/admin/companies/{company_id}", headers=admin).status_code == 404


def test_delete_with_dependents_is_409(client, admin):
    resp = client.delete("/api/v1/admin/companies/1", headers=admin)
    assert resp.status_code == 409
    assert "department" in resp.get_json()["message"]


def test_invalid_reference_is_400(client, admin):
    resp = client.post("/api/v1/admin/departments", json={"name": "X", "company_id": 99}, headers=admin)
    assert resp.status_code == 400


def test_invalid_json_is_400(client, admin):
    resp = client.post(
        "/api/v1/admin/companies", data="not json", headers={**admin, "Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "invalid JSON payload"


def test_scoped_user_submits_and_reads_own_reports(client, scoped):
    resp = submit(client, scoped)
    assert resp.status_code == 200
    report = resp.get_json()["data"]
    assert report["employee_name"] == "Bob"
    assert report["commission_value"] == 150.0

    listing = client.get("/api/v1/my-reports", headers=scoped).get_json()["data"]
    assert listing["total"] == 1
    assert client.get(f"/api/v1/my-reports/{report['id']}", headers=scoped).status_code == 200


def test_scoped_user_cannot_submit_for_others(client, scoped):
    assert submit(client, scoped, employee_id=1).status_code == 403


def test_scoped_user_cannot_read_others_reports(client, admin, scoped):
    other = submit(client, admin, employee_id=1).get_json()["data"]
    assert client.get(f"/api/v1/my-reports/{other['id']}", headers=scoped).status_code == 404


def test_batch_submit(client, scoped, admin):
    items = [
        {"date": "2024-01-15", "employee_id": 2, "commission_project_id": 1, "commission_value": 10},
        {"date": "2024-01-16", "employee_id": 2, "commission_project_id": 2, "commission_value": 20},
    ]
    resp = client.post("/api/v1/reports/batch", json=items, headers=scoped)
    assert resp.get_json()["data"]["count"] == 2

    items.append({"date": "2024-01-16", "employee_id": 1, "commission_project_id": 2, "commission_value": 5})
    assert client.post("/api/v1/reports/batch", json=items, headers=scoped).status_code == 403
    assert client.get("/api/v1/admin/reports", headers=admin).get_json()["data"]["total"] == 2


def test_monthly_summaries(client, admin, scoped):
    submit(client, admin, employee_id=1, commission_value=100)
    submit(client, admin, employee_id=2, commission_value=150)
    submit(client, admin, employee_id=2, commission_value=50, date="2024-01-31")

    everyone = client.get("/api/v1/admin/reports/monthly-summary?month=2024-01", headers=admin).get_json()["data"]
    assert everyone["start_date"] == "2024-01-01"
    assert everyone["end_date"] == "2024-01-31"
    assert [(r["employee_id"], r["total_value"]) for r in everyone["summaries"]] == [(1, 100.0), (2, 200.0)]

    mine = client.get("/api/v1/my-reports/monthly-summary?month=2024-01", headers=scoped).get_json()["data"]
    assert [(r["employee_id"], r["total_value"]) for r in mine["summaries"]] == [(2, 200.0)]


@pytest.mark.parametrize("query,message", [("", "month required"), ("?month=2024-1", "invalid date format")])
def test_monthly_summary_month_errors(client, admin, query, message):
    resp = client.get(f"/api/v1/admin/reports/monthly-summary{query}", headers=admin)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == message


def test_user_without_scope_sees_nothing(client, auth_header):
    headers = auth_header(3)
    assert client.get("/api/v1/employees", headers=headers).get_json()["data"]["employees"] == []


def test_admin_creates_user_with_scope_list(client, admin):
    resp = client.post(
        "/api/v1/admin/users",
        json={"username": "user9", "name": "Nine", "password": "secret9", "employee_scope": [3, 1]},
        headers=admin,
    )
    assert resp.get_json()["data"]["employee_scope"] == "1,3"

    dup = client.post(
        "/api/v1/admin/users",
        json={"username": "user9", "name": "Nine", "password": "secret9"},
        headers=admin,
    )
    assert dup.status_code == 409


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.get_json()["code"] == 404


def test_report_listing_date_range(client, admin):
    submit(client, admin, date="2024-01-10")
    submit(client, admin, date="2024-02-10")

    resp = client.get("/api/v1/admin/reports?start_date=2024-02-01&end_date=2024-02-29", headers=admin)
    dates = [r["date"] for r in resp.get_json()["data"]["reports"]]
    assert dates == ["2024-02-10"]

    bad = client.get("/api/v1/admin/reports?start_date=02/01/2024", headers=admin)
    assert bad.status_code == 400


@pytest.mark.parametrize("body", [{"username": 123}, {"username": "user1", "password": 123456}])
def test_login_with_non_text_fields_is_401(client, body):
    resp = client.post("/api/v1/login", json=body)
    assert resp.status_code == 401


def test_create_user_with_numeric_password_is_400(client, admin):
    resp = client.post(
        "/api/v1/admin/users",
        json={"username": "user9", "name": "Nine", "password": 1234567},
        headers=admin,
    )
    assert resp.status_code == 400
