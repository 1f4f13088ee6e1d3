from conftest import register


def test_register_returns_user_and_token(client):
    response = client.post(
        "/api/auth/register",
        json={
            "username": "carol",
            "email": "Carol@Example.com ",
            "password": "secret1",
            "firstName": "Carol",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert user["username"] == "carol"
    assert user["email"] == "carol@example.com"
    assert user["firstName"] == "Carol"
    assert user["followers"] == [] and user["following"] == []
    assert "password" not in user
    assert body["data"]["token"]


def test_register_rejects_duplicate_username(client, alice):
    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "other@example.com", "password": "secret1"},
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Username is already taken"}


def test_register_rejects_duplicate_email(client, alice):
    response = client.post(
        "/api/auth/register",
        json={"username": "alice2", "email": "ALICE@example.com", "password": "secret1"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Email is already registered"


def test_register_validation_errors_are_listed_per_field(client):
    response = client.post(
        "/api/auth/register",
        json={"username": "ab", "email": "not-an-email", "password": "123"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"username", "email", "password"} <= fields


def test_login_success(client, alice):
    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": "password123"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["id"] == alice.id
    assert body["data"]["token"]


def test_login_wrong_password_and_unknown_email_look_the_same(client, alice):
    wrong = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "who@example.com", "password": "nope"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"success": False, "message": "Invalid credentials"}


def test_me_returns_current_user(client, alice):
    response = client.get("/api/auth/me", headers=alice.headers)
    assert response.status_code == 200
    assert response.json()["data"]["user"]["username"] == "alice"


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authorized, no token"}


def test_me_rejects_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, token failed"


def test_token_signed_with_other_secret_is_rejected(client, alice):
    from social_network_api.app.core.security import issue_token_for_user

    forged = issue_token_for_user(alice.id, "another-secret", 60)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401


def test_token_for_missing_user_is_rejected(client, settings):
    from social_network_api.app.core.security import issue_token_for_user

    token = issue_token_for_user(999, settings.secret_key, 60)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "User no longer exists"


def test_each_registration_gets_its_own_identity(client):
    first = register(client, "first")
    second = register(client, "second")
    me = client.get("/api/auth/me", headers=second.headers).json()["data"]["user"]
    assert me["id"] == second.id != first.id
