from datetime import timedelta

import pytest

from pta.core.security import create_token

pytestmark = pytest.mark.anyio


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"]


async def test_request_id_is_echoed(client):
    response = await client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


async def test_missing_token_is_401(client, world):
    response = await client.get("/api/v1/parents")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "AUTH_ERROR"


async def test_bad_and_expired_tokens_are_401(client, world):
    response = await client.get("/api/v1/parents", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "TOKEN_ERROR"

    expired = create_token(world.admin.id, expires_delta=timedelta(minutes=-5))
    response = await client.get("/api/v1/parents", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token has expired"


async def test_token_from_cookie(client, world):
    cookie = f"access_token={create_token(world.admin.id)}"
    response = await client.get("/api/v1/schools", headers={"Cookie": cookie})
    assert response.status_code == 200
    assert [s["name"] for s in response.json()] == ["Lincoln Elementary"]


async def test_profile_setup_flow(client, world, auth_headers):
    headers = auth_headers("fresh-user")

    response = await client.get("/api/v1/parents", headers=headers)
    assert response.status_code == 403
    assert response.json()["error_code"] == "UNKNOWN_ROLE"

    response = await client.get("/api/v1/profile", headers=headers)
    assert response.status_code == 404

    response = await client.post(
        "/api/v1/profile",
        json={"full_name": "Fresh User", "school_id": world.lincoln.id},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["role"] == "parent"
    assert response.json()["school"]["name"] == "Lincoln Elementary"

    response = await client.put("/api/v1/profile", json={"full_name": "Fresh Parent"}, headers=headers)
    assert response.json()["full_name"] == "Fresh Parent"

    response = await client.post(
        "/api/v1/profile",
        json={"full_name": "Again", "school_id": world.lincoln.id},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "CONFLICT"


async def test_record_payment_over_http(client, world, auth_headers):
    response = await client.post(
        "/api/v1/payments",
        json={"parent_id": world.jane.id, "amount": 250, "payment_method": "cash"},
        headers=auth_headers(world.treasurer.id),
    )
    assert response.status_code == 201
    payment = response.json()
    assert payment["amount"] == 250.0
    assert payment["parent"]["school"]["name"] == "Lincoln Elementary"
    assert payment["created_by_user"]["id"] == world.treasurer.id

    response = await client.get(f"/api/v1/parents/{world.jane.id}", headers=auth_headers(world.admin.id))
    parent = response.json()
    assert parent["payment_status"] is True
    assert all(child["payment_status"] for child in parent["students"])
    assert [p["id"] for p in parent["payments"]] == [payment["id"]]

    response = await client.get(f"/api/v1/payments/{payment['id']}", headers=auth_headers(world.admin.id))
    assert [s["name"] for s in response.json()["parent"]["students"]] == ["Amy Doe", "Ben Doe"]


async def test_payment_validation_envelope(client, world, auth_headers):
    response = await client.post(
        "/api/v1/payments",
        json={"parent_id": world.jane.id, "amount": -100, "payment_method": "bogus"},
        headers=auth_headers(world.treasurer.id),
    )
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "VALIDATION_ERROR"
    assert set(body["details"]["fields"]) == {"amount", "payment_method"}

    response = await client.get("/api/v1/payments", headers=auth_headers(world.treasurer.id))
    assert response.json() == []


async def test_payments_cannot_be_edited_over_http(client, world, auth_headers):
    created = await client.post(
        "/api/v1/payments",
        json={"parent_id": world.jane.id, "amount": 250},
        headers=auth_headers(world.treasurer.id),
    )
    payment_id = created.json()["id"]

    response = await client.put(f"/api/v1/payments/{payment_id}", json={"amount": 1}, headers=auth_headers(world.admin.id))
    assert response.status_code == 403
    response = await client.delete(f"/api/v1/payments/{payment_id}", headers=auth_headers(world.admin.id))
    assert response.status_code == 403
    assert response.json()["error_code"] == "PERMISSION_DENIED"


async def test_status_override_over_http(client, world, auth_headers):
    response = await client.post(
        "/api/v1/payments/status",
        json={"parent_ids": [world.john.id], "payment_status": True},
        headers=auth_headers(world.admin.id),
    )
    assert response.status_code == 200
    assert response.json() == {"parent_ids": [world.john.id], "payment_status": True, "students_updated": 1}

    response = await client.post(
        "/api/v1/payments/status",
        json={"parent_ids": [], "payment_status": True},
        headers=auth_headers(world.admin.id),
    )
    assert response.status_code == 422


async def test_parent_dashboard(client, world, auth_headers):
    headers = auth_headers(world.parent_user.id)

    response = await client.get("/api/v1/parents/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Jane Doe"

    response = await client.get("/api/v1/students", headers=headers)
    children = response.json()
    assert [c["name"] for c in children] == ["Amy Doe", "Ben Doe"]
    assert children[0]["class"]["name"] == "3-A"

    response = await client.get(f"/api/v1/students/{world.cal.id}", headers=headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"

    response = await client.get("/api/v1/classes", headers=headers)
    assert response.status_code == 403


async def test_teacher_dashboard(client, world, auth_headers):
    headers = auth_headers(world.teacher.id)

    response = await client.get("/api/v1/classes", headers=headers)
    assert [c["name"] for c in response.json()] == ["3-A"]

    response = await client.get(f"/api/v1/reports/teacher/{world.teacher.id}", headers=headers)
    assert response.status_code == 200
    assert [s["name"] for s in response.json()[0]["students"]] == ["Amy Doe", "Ben Doe"]


async def test_crud_over_http(client, world, auth_headers):
    headers = auth_headers(world.principal.id)

    response = await client.post("/api/v1/classes", json={"name": "6-A", "grade_level": "6"}, headers=headers)
    assert response.status_code == 201
    class_id = response.json()["id"]

    response = await client.post(
        "/api/v1/parents",
        json={"name": "Noel Park", "email": "noel@example.com"},
        headers=headers,
    )
    assert response.status_code == 201
    parent_id = response.json()["id"]

    response = await client.post(
        "/api/v1/students",
        json={"name": "Nia Park", "parent_id": parent_id, "class_id": class_id},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["class"]["id"] == class_id

    response = await client.get(f"/api/v1/classes/{class_id}", headers=headers)
    assert [s["name"] for s in response.json()["students"]] == ["Nia Park"]

    response = await client.delete(f"/api/v1/classes/{class_id}", headers=headers)
    assert response.status_code == 204

    response = await client.get("/api/v1/students", params={"parent_id": parent_id}, headers=headers)
    assert response.json()[0]["class_id"] is None


async def test_reports_over_http(client, world, auth_headers):
    headers = auth_headers(world.admin.id)

    response = await client.get("/api/v1/reports/school-summary", headers=headers)
    assert response.status_code == 200
    assert response.json()["total_parents"] == 2

    response = await client.get("/api/v1/reports/payment-analytics", headers=headers)
    assert response.json()["payment_count"] == 0

    response = await client.get("/api/v1/reports/unpaid-parents", headers=headers)
    assert [p["name"] for p in response.json()] == ["Jane Doe", "John Roe"]

    response = await client.get("/api/v1/reports/classes-without-teachers", headers=headers)
    assert response.json() == []


async def test_payment_categories(client):
    response = await client.get("/api/v1/payment-categories")
    assert response.status_code == 200
    membership = next(c for c in response.json() if c["value"] == "membership")
    assert membership["default_amount"] == 250.0


async def test_request_validation_lists_fields(client, world, auth_headers):
    response = await client.post(
        "/api/v1/parents",
        json={"email": "not-an-email"},
        headers=auth_headers(world.admin.id),
    )
    assert response.status_code == 422
    assert set(response.json()["details"]["fields"]) == {"name", "email"}


async def test_unreachable_store_is_503(unreachable_client):
    response = await unreachable_client.get("/api/health")
    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "STORE_UNAVAILABLE"

    response = await unreachable_client.get(
        "/api/v1/parents",
        headers={"Authorization": f"Bearer {create_token('admin-lincoln')}"},
    )
    assert response.status_code == 503
    assert response.json()["error_code"] == "STORE_UNAVAILABLE"


async def test_duplicate_profile_is_409(client, world, auth_headers):
    response = await client.post(
        "/api/v1/users",
        json={"id": world.teacher.id, "role": "teacher"},
        headers=auth_headers(world.admin.id),
    )
    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "CONFLICT"
