from datetime import datetime

from costtrack.tests.conftest import PASSWORD, login


def test_protected_routes_require_session(anon_client):
    for path in ("/api/projects", "/api/cost-codes", "/api/cost-entries",
                 "/api/change-orders", "/api/audit-logs", "/api/users", "/api/auth/user"):
        response = anon_client.get(path)
        assert response.status_code == 401, path
        assert response.get_json()["errorType"] == "AUTHENTICATION_REQUIRED"


def test_writes_require_session(anon_client):
    response = anon_client.post("/api/projects", json={"name": "x"})
    assert response.status_code == 401


def test_login_returns_user_and_establishes_session(anon_client, users):
    response = login(anon_client, "pm")
    assert response.status_code == 200
    body = response.get_json()
    assert body["id"] == users["pm"]
    assert body["displayName"] == "Pat Morgan"
    assert "passwordHash" not in body

    me = anon_client.get("/api/auth/user")
    assert me.status_code == 200
    assert me.get_json()["account"] == "pm"


def test_login_rejects_bad_credentials(anon_client, users):
    assert login(anon_client, "pm", "wrong-password").status_code == 401
    assert login(anon_client, "nobody").status_code == 401
    assert anon_client.get("/api/projects").status_code == 401


def test_login_malformed_body(anon_client, users):
    response = anon_client.post("/api/login", data="not json", content_type="application/json")
    assert response.status_code == 400
    assert response.get_json()["errorType"] == "VALIDATION_ERROR"


def test_logout_ends_session(client):
    assert client.post("/api/logout").status_code == 204
    assert client.get("/api/projects").status_code == 401
    # idempotent
    assert client.post("/api/logout").status_code == 204


def test_deactivated_account_cannot_sign_in(client, anon_client, users):
    response = client.put(f"/api/users/{users['exec']}", json={"isActive": False})
    assert response.status_code == 200
    assert response.get_json()["isActive"] is False

    response = login(anon_client, "exec")
    assert response.status_code == 403
    assert response.get_json()["errorType"] == "PERMISSION_DENIED"


def test_register_user(client, anon_client):
    response = client.post("/api/users", json={
        "account": "estimator1",
        "password": "long-enough-pw",
        "email": "est@example.com",
        "role": "Estimator",
    })
    assert response.status_code == 201
    assert response.get_json()["role"] == "Estimator"

    assert login(anon_client, "estimator1", "long-enough-pw").status_code == 200

    duplicate = client.post("/api/users", json={"account": "estimator1", "password": PASSWORD})
    assert duplicate.status_code == 409
    assert duplicate.get_json()["errors"][0]["field"] == "account"


def test_register_user_validation(client):
    response = client.post("/api/users", json={"account": "short", "password": "123"})
    assert response.status_code == 422
    assert response.get_json()["errors"][0]["field"] == "password"


def test_update_user_role(client, users):
    response = client.put(f"/api/users/{users['pm']}", json={"role": "Accountant", "firstName": "Patricia"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["role"] == "Accountant"
    assert body["displayName"] == "Patricia Morgan"

    assert client.put(f"/api/users/{users['pm']}", json={"role": None}).status_code == 422
    assert client.put("/api/users/missing", json={"role": "PM"}).status_code == 404


def test_list_users(client):
    accounts = [u["account"] for u in client.get("/api/users").get_json()]
    assert accounts == ["exec", "pm"]


def test_deactivation_ends_existing_session(client, exec_client, users):
    assert exec_client.get("/api/projects").status_code == 200

    assert client.put(f"/api/users/{users['exec']}", json={"isActive": False}).status_code == 200

    response = exec_client.post("/api/projects", json={
        "name": "After deactivation", "projectNumber": "X-1", "budget": "1.00", "projectType": "commercial",
    })
    assert response.status_code == 403
    assert response.get_json()["errorType"] == "PERMISSION_DENIED"
    # the session is gone, not just refused once
    assert exec_client.get("/api/projects").status_code == 401
    assert exec_client.get("/api/auth/user").status_code == 401

    assert client.get("/api/projects").get_json() == []


def test_login_stamps_updated_at(anon_client, users):
    first = login(anon_client, "pm").get_json()
    second = login(anon_client, "pm").get_json()
    assert datetime.fromisoformat(second["updatedAt"]) > datetime.fromisoformat(first["updatedAt"])
    assert second["createdAt"] == first["createdAt"]
    assert second["displayName"] == first["displayName"]
