from readtrack.routers import auth as auth_router
from readtrack.security import create_access_token, decode_access_token


def test_register_login_and_me(client):
    r = client.post("/auth/register", json={"email": "Reader@Example.com", "password": "long-enough", "name": "Reader"})
    assert r.status_code == 201, r.text
    assert r.json()["data"]["role"] == "STUDENT"
    assert r.json()["data"]["email"] == "reader@example.com"

    r = client.post("/auth/login", data={"username": "reader@example.com", "password": "long-enough"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"}).json()["data"]
    assert me["name"] == "Reader"
    assert me["points"] == 0
    assert me["level"] == 1


def test_register_duplicate_email(client):
    body = {"email": "dup@example.com", "password": "long-enough", "name": "Dup"}
    assert client.post("/auth/register", json=body).status_code == 201
    assert client.post("/auth/register", json=body).status_code == 409


def test_short_password_is_400(client):
    r = client.post("/auth/register", json={"email": "a@example.com", "password": "short", "name": "A"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_wrong_password_is_401(client):
    client.post("/auth/register", json={"email": "b@example.com", "password": "long-enough", "name": "B"})
    r = client.post("/auth/login", data={"username": "b@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json() == {"error": "Incorrect email or password"}


def test_invalid_token_is_401(client):
    r = client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_admin_changes_role(client, make_user, headers):
    admin, student = make_user(role="ADMIN"), make_user()
    r = client.patch(f"/users/{student.id}/role", json={"role": "TEACHER"}, headers=headers(admin))
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "TEACHER"
    assert client.get("/users", headers=headers(student)).status_code == 403


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["service"] == "ReadTrack API"


def test_unknown_route_uses_error_shape(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


def test_register_race_on_unique_email_is_409(client, monkeypatch, make_user):
    existing = make_user()
    # el chequeo previo no lo ve: la restricción UNIQUE decide
    monkeypatch.setattr(auth_router, "email_taken", lambda db, email: False)
    r = client.post("/auth/register", json={"email": existing.email, "password": "long-enough", "name": "Late"})
    assert r.status_code == 409
    assert r.json() == {"error": "Email already registered"}


def test_token_carries_user_claims(make_user):
    teacher = make_user(role="TEACHER")
    claims = decode_access_token(create_access_token(teacher))
    assert claims["sub"] == teacher.email
    assert claims["uid"] == teacher.id
    assert claims["role"] == "TEACHER"
