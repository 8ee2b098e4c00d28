"""Shared fixtures: an isolated SQLite-backed app per test."""

import hashlib
import hmac
import json
import time
from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.context import AppContext
from core.security import hash_password
from main import create_app
from models.catalog import Product
from models.user import User

PASSWORD = "Secret123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'shop.db'}",
        session_key="test-session-secret",
        jwt_secret_key="test-jwt-secret",
        stripe_server_key="sk_test_dummy",
        webhook_endpoint="whsec_test_secret",
        port=8000,
    )


@pytest.fixture
def context(settings):
    ctx = AppContext(settings)
    ctx.db.create_all()
    yield ctx
    ctx.shutdown()


@pytest.fixture
def app(context):
    return create_app(context=context)


@pytest.fixture
def make_client(app):
    """Factory for independent browsers (separate cookie jars) on one app."""
    with ExitStack() as stack:
        yield lambda: stack.enter_context(TestClient(app))


@pytest.fixture
def client(make_client):
    return make_client()


def create_user(context, email, password=PASSWORD, role="user"):
    password_hash, salt = hash_password(password)
    db = context.db.SessionLocal()
    try:
        user = User(email=email, password_hash=password_hash, salt=salt, role=role, addresses=[])
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.id
    finally:
        db.close()


def login(client, email, password=PASSWORD):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def user_client(make_client):
    c = make_client()
    resp = c.post("/auth/signup", json={"email": "alice@example.com", "password": PASSWORD})
    assert resp.status_code == 201, resp.text
    c.user_id = resp.json()["id"]
    return c


@pytest.fixture
def other_client(make_client):
    c = make_client()
    resp = c.post("/auth/signup", json={"email": "bob@example.com", "password": PASSWORD})
    assert resp.status_code == 201, resp.text
    c.user_id = resp.json()["id"]
    return c


@pytest.fixture
def admin_client(context, make_client):
    c = make_client()
    c.user_id = create_user(context, "admin@example.com", role="admin")
    login(c, "admin@example.com")
    return c


def product_payload(**overrides):
    data = {
        "title": "Trail Runner",
        "description": "Lightweight running shoe",
        "price": 1000,
        "discount_percentage": 15,
        "rating": 4.5,
        "stock": 10,
        "brand": "stride",
        "category": "shoes",
        "thumbnail": "https://cdn.example.com/trail.png",
        "images": ["https://cdn.example.com/trail-1.png"],
    }
    data.update(overrides)
    return data


@pytest.fixture
def product(context):
    db = context.db.SessionLocal()
    try:
        item = Product(**product_payload(), deleted=False)
        item.refresh_discount_price()
        db.add(item)
        db.commit()
        db.refresh(item)
        return item.id
    finally:
        db.close()


ADDRESS = {
    "name": "Alice",
    "phone": "9999999999",
    "street": "1 Main St",
    "city": "Pune",
    "state": "MH",
    "pin_code": "411001",
}


def stripe_signature(payload: bytes, secret: str) -> str:
    """Build a ``Stripe-Signature`` header the way Stripe signs webhooks."""
    timestamp = int(time.time())
    signed_payload = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def stripe_event(event_type: str, order_ref) -> bytes:
    return json.dumps({
        "id": "evt_1",
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": "pi_1",
                "object": "payment_intent",
                "metadata": {"order_id": str(order_ref)},
            }
        },
    }).encode("utf-8")
