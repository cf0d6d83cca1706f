from datetime import timedelta

from busbooking.auth.utils import create_access_token


def test_login_returns_token_and_roles(client, admin_user):
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["roles"] == ["admin"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "admin@example.com"


def test_login_with_wrong_password(client, admin_user):
    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "admin@example.com", "password": "nope"},
    )
    assert resp.status_code == 401
    assert resp.json() == {"message": "Incorrect email or password"}


def test_admin_routes_need_a_token(client, seed):
    resp = client.get("/api/v1/admin/trips")
    assert resp.status_code == 401
    assert resp.json() == {"message": "Not authenticated"}


def test_expired_token_is_rejected(client, admin_user):
    token = create_access_token({"sub": str(admin_user.id)}, expires_delta=timedelta(minutes=-1))
    resp = client.get("/api/v1/admin/trips", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_plain_users_are_forbidden(client, user_headers):
    resp = client.get("/api/v1/admin/routes", headers=user_headers)
    assert resp.status_code == 403
    assert resp.json() == {"message": "Admin or agent role required"}


def test_agents_are_staff(client, agent_headers):
    assert client.get("/api/v1/admin/trips", headers=agent_headers).status_code == 200


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "abc123"
