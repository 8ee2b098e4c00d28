"""Database access and key derivation must never run on the event loop thread."""

import asyncio

import pytest
from sqlalchemy import event

import auth.router
import auth.strategies
from conftest import PASSWORD, stripe_event, stripe_signature


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


@pytest.fixture
def loop_calls(context, monkeypatch):
    """(kind, ran_on_event_loop) for every SQL statement and password derivation."""
    calls = []

    def record(conn, cursor, statement, *args):
        calls.append(("sql", _on_event_loop()))

    def tracking(kind, func):
        def wrapper(*args, **kwargs):
            calls.append((kind, _on_event_loop()))
            return func(*args, **kwargs)
        return wrapper

    monkeypatch.setattr(auth.strategies, "derive_password_hash", tracking("derive", auth.strategies.derive_password_hash))
    monkeypatch.setattr(auth.router, "hash_password", tracking("hash", auth.router.hash_password))
    event.listen(context.db.engine, "before_cursor_execute", record)
    yield calls
    event.remove(context.db.engine, "before_cursor_execute", record)


def _kinds(calls):
    return {kind for kind, _ in calls}


def _on_loop(calls):
    return [kind for kind, on_loop in calls if on_loop]


def test_signup_and_login_run_off_the_event_loop(make_client, loop_calls):
    browser = make_client()
    assert browser.post("/auth/signup", json={"email": "dave@example.com", "password": PASSWORD}).status_code == 201
    assert browser.post("/auth/login", json={"email": "dave@example.com", "password": PASSWORD}).status_code == 201
    assert browser.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}).status_code == 401

    assert _kinds(loop_calls) == {"sql", "hash", "derive"}
    assert _on_loop(loop_calls) == []


def test_guarded_requests_run_off_the_event_loop(user_client, make_client, loop_calls):
    # Session cookie path
    assert user_client.get("/cart").status_code == 200
    # Token cookie path
    token_only = make_client()
    resp = token_only.get("/cart", headers={"Cookie": f"jwt={user_client.cookies.get('jwt')}"})
    assert resp.status_code == 200
    assert user_client.get("/auth/check").status_code == 200

    assert "sql" in _kinds(loop_calls)
    assert _on_loop(loop_calls) == []


def test_webhook_runs_off_the_event_loop(client, settings, loop_calls):
    payload = stripe_event("payment_intent.succeeded", 999)
    resp = client.post(
        "/webhook",
        content=payload,
        headers={"Stripe-Signature": stripe_signature(payload, settings.webhook_endpoint), "Content-Type": "application/json"},
    )
    assert resp.status_code == 200

    assert "sql" in _kinds(loop_calls)
    assert _on_loop(loop_calls) == []
