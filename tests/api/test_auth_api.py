"""
Auth API tests: register, login (JSON and form), cookie session, logout.
"""

API = "/api/v1"

REGISTER_BODY = {
    "email": "Reporter@Example.com",
    "password": "s3cretpass",
    "first_name": "Sari",
    "last_name": "Dewi",
}


def register(client, **overrides):
    return client.post(f"{API}/auth/register", json={**REGISTER_BODY, **overrides})


def test_register_returns_tokens_and_user(client):
    resp = register(client)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["access_token"] != data["refresh_token"]

    user = data["user"]
    assert user["email"] == "reporter@example.com"
    assert user["role"] == "AUTHOR"
    assert user["full_name"] == "Sari Dewi"
    assert "password_hash" not in user


def test_register_duplicate_email(client):
    register(client)
    resp = register(client, email="reporter@example.com")

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


def test_register_short_password(client):
    resp = register(client, password="short")

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "Password must be at least 8 characters"


def test_register_bad_email(client):
    resp = register(client, email="not-an-email")
    assert resp.status_code == 400


def test_login_sets_cookie_and_me_reads_it(client):
    register(client)

    resp = client.post(
        f"{API}/auth/login", json={"email": "reporter@example.com", "password": "s3cretpass"}
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["last_login"] is not None
    assert client.cookies.get("access_token", "").strip('"').startswith("Bearer ")

    me = client.get(f"{API}/auth/me")
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "reporter@example.com"


def test_logout_clears_cookie(client):
    register(client)
    client.post(f"{API}/auth/login", json={"email": "reporter@example.com", "password": "s3cretpass"})

    resp = client.post(f"{API}/auth/logout")

    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "success"}
    assert client.get(f"{API}/auth/me").status_code == 401


def test_login_wrong_password(client):
    register(client)

    resp = client.post(
        f"{API}/auth/login", json={"email": "reporter@example.com", "password": "wrongpass"}
    )

    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Invalid credentials"


def test_login_unknown_user_same_error(client):
    resp = client.post(f"{API}/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Invalid credentials"


def test_token_form_flow(client):
    register(client)

    resp = client.post(
        f"{API}/auth/token",
        data={"username": "reporter@example.com", "password": "s3cretpass"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["data"]["first_name"] == "Sari"


def test_refresh_token_is_not_an_access_token(client):
    data = register(client).json()["data"]

    resp = client.get(
        f"{API}/auth/me", headers={"Authorization": f"Bearer {data['refresh_token']}"}
    )

    assert resp.status_code == 401


def test_me_requires_auth(client):
    resp = client.get(f"{API}/auth/me")

    assert resp.status_code == 401
    assert resp.json()["error"] == {"code": "UNAUTHORIZED", "message": "Not authenticated"}


def test_first_account_may_take_admin(client):
    resp = register(client, role="ADMIN")

    assert resp.status_code == 201
    assert resp.json()["data"]["user"]["role"] == "ADMIN"


def test_self_registration_cannot_take_staff_role(client, author_headers):
    resp = register(client, role="EDITOR")

    assert resp.status_code == 403
    assert resp.json()["error"] == {
        "code": "FORBIDDEN",
        "message": "Only admins can register EDITOR accounts",
    }

    resp = client.post(
        f"{API}/auth/register",
        json={**REGISTER_BODY, "email": "other@example.com", "role": "ADMIN"},
        headers=author_headers,
    )
    assert resp.status_code == 403


def test_admin_registers_editor(client, register_user):
    admin_headers, _ = register_user("chief@example.com", role="ADMIN")

    resp = client.post(
        f"{API}/auth/register", json={**REGISTER_BODY, "role": "EDITOR"}, headers=admin_headers
    )

    assert resp.status_code == 201
    assert resp.json()["data"]["user"]["role"] == "EDITOR"
