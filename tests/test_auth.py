import jwt
import pytest

from conftest import PASSWORD, create_user, login
from models.session import SessionRecord
from models.user import User


def _session_rows(context):
    db = context.db.SessionLocal()
    try:
        return [row.data for row in db.query(SessionRecord).all()]
    finally:
        db.close()


# ---------------------------------------------------------------------------
# signup
# ---------------------------------------------------------------------------


def test_signup_creates_user_and_logs_in(client, context):
    resp = client.post("/auth/signup", json={"email": "new@example.com", "password": PASSWORD, "name": "New"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["role"] == "user"
    assert client.cookies.get("jwt")
    assert client.cookies.get("sid")

    db = context.db.SessionLocal()
    try:
        user = db.query(User).filter(User.email == "new@example.com").one()
        assert user.id == body["id"]
        assert user.password_hash != PASSWORD
        assert len(user.salt) == 32
    finally:
        db.close()


def test_signup_rejects_duplicate_email(client):
    payload = {"email": "dup@example.com", "password": PASSWORD}
    assert client.post("/auth/signup", json=payload).status_code == 201
    resp = client.post("/auth/signup", json=payload)
    assert resp.status_code == 409


def test_signup_enforces_password_policy(client):
    resp = client.post("/auth/signup", json={"email": "weak@example.com", "password": "short"})
    assert resp.status_code == 400
    assert "8 characters" in resp.json()["detail"]


@pytest.mark.parametrize("password,rule", [
    ("lowercase123", "uppercase"),
    ("UPPERCASE123", "lowercase"),
    ("NoDigitsHere", "digit"),
])
def test_signup_names_the_failed_password_rule(client, password, rule):
    resp = client.post("/auth/signup", json={"email": "weak@example.com", "password": password})
    assert resp.status_code == 400
    assert rule in resp.json()["detail"]
    assert "sid" not in resp.cookies


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------


def test_login_issues_token_and_session(client, context, settings):
    user_id = create_user(context, "carol@example.com", role="admin")
    body = login(client, "carol@example.com")
    assert body == {"id": user_id, "role": "admin"}

    token = client.cookies.get("jwt")
    assert token
    claims = jwt.decode(token, settings.jwt_secret_key, algorithms=["HS256"])
    assert claims == {"id": user_id, "role": "admin", "email": "carol@example.com"}

    assert _session_rows(context) == [{"id": user_id, "role": "admin"}]


def test_login_cookies_are_http_only(client, context):
    create_user(context, "dave@example.com")
    resp = client.post("/auth/login", json={"email": "dave@example.com", "password": PASSWORD})
    set_cookie = " ".join(resp.headers.get_list("set-cookie")).lower()
    assert "jwt=" in set_cookie and "sid=" in set_cookie
    assert set_cookie.count("httponly") == 2


def test_wrong_password_and_unknown_email_look_identical(client, context):
    create_user(context, "erin@example.com")
    wrong_password = client.post("/auth/login", json={"email": "erin@example.com", "password": "Wrong1234"})
    unknown_email = client.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "invalid credentials"}
    assert "jwt" not in client.cookies
    assert _session_rows(context) == []


def test_login_without_credentials(client):
    resp = client.post("/auth/login", json={"email": "x@example.com"})
    assert resp.status_code == 400
    assert client.post("/auth/login", content=b"not json").status_code == 400


def test_corrupt_credential_record_is_an_authentication_error(client, context):
    user_id = create_user(context, "frank@example.com")
    db = context.db.SessionLocal()
    try:
        db.query(User).filter(User.id == user_id).update({User.salt: "not-hex"})
        db.commit()
    finally:
        db.close()

    resp = client.post("/auth/login", json={"email": "frank@example.com", "password": PASSWORD})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Authentication failed"}


# ---------------------------------------------------------------------------
# check / logout
# ---------------------------------------------------------------------------


def test_check_returns_sanitized_user(user_client):
    resp = user_client.get("/auth/check")
    assert resp.status_code == 200
    assert resp.json() == {"id": user_client.user_id, "role": "user", "email": "alice@example.com"}


def test_check_without_token(client):
    assert client.get("/auth/check").status_code == 401


def test_check_with_forged_token(client, make_client):
    forged = jwt.encode({"id": 1, "role": "admin"}, "not-the-secret", algorithm="HS256")
    fresh = make_client()
    resp = fresh.get("/auth/check", headers={"Cookie": f"jwt={forged}"})
    assert resp.status_code == 401


def test_check_for_deleted_user(client, context, settings):
    token = jwt.encode({"id": 999, "role": "user"}, settings.jwt_secret_key, algorithm="HS256")
    resp = client.get("/auth/check", headers={"Cookie": f"jwt={token}"})
    assert resp.status_code == 401


def test_logout_ends_session(user_client, context):
    assert user_client.get("/users/own").status_code == 200
    resp = user_client.get("/auth/logout")
    assert resp.status_code == 200
    assert _session_rows(context) == []
    assert user_client.get("/users/own").status_code == 401
