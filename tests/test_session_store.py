from datetime import datetime, timedelta, timezone

from auth.session import SessionStore, deserialize_user, serialize_user
from auth.strategies import Identity
from models.session import SessionRecord
from models.user import User


def _user():
    return User(id=5, email="a@example.com", role="admin", password_hash="aa", salt="bb")


def test_serialize_keeps_only_id_and_role():
    assert serialize_user(_user()) == {"id": 5, "role": "admin"}


def test_deserialize_returns_identity_verbatim():
    assert deserialize_user({"id": 5, "role": "admin"}) == Identity(id=5, role="admin")


def test_create_and_load(context):
    store = SessionStore(timedelta(days=7))
    db = context.db.SessionLocal()
    try:
        session_id = store.create(db, _user())
        assert store.load(db, session_id) == {"id": 5, "role": "admin"}
        assert store.load(db, "missing") is None
    finally:
        db.close()


def test_expired_session_is_not_loaded_and_gets_purged(context):
    store = SessionStore(timedelta(days=7))
    db = context.db.SessionLocal()
    try:
        live = store.create(db, _user())
        db.add(SessionRecord(
            id="stale",
            data={"id": 5, "role": "admin"},
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        ))
        db.commit()

        assert store.load(db, "stale") is None
        assert store.purge_expired(db) == 1
        assert db.query(SessionRecord).count() == 1
        assert store.load(db, live) is not None
    finally:
        db.close()


def test_touch_extends_expiry(context):
    store = SessionStore(timedelta(days=7))
    db = context.db.SessionLocal()
    try:
        session_id = store.create(db, _user())
        db.query(SessionRecord).filter(SessionRecord.id == session_id).update(
            {SessionRecord.expires_at: datetime.now(timezone.utc) + timedelta(seconds=5)}
        )
        db.commit()

        store.touch(db, session_id)
        # Still alive well past the original five seconds
        later = datetime.now(timezone.utc) + timedelta(days=6)
        assert (
            db.query(SessionRecord)
            .filter(SessionRecord.id == session_id, SessionRecord.expires_at > later)
            .count()
            == 1
        )
    finally:
        db.close()


def test_destroy(context):
    store = SessionStore(timedelta(days=7))
    db = context.db.SessionLocal()
    try:
        session_id = store.create(db, _user())
        store.destroy(db, session_id)
        assert store.load(db, session_id) is None
    finally:
        db.close()


def test_destroy_for_user_only_touches_that_user(context):
    store = SessionStore(timedelta(days=7))
    db = context.db.SessionLocal()
    try:
        mine = store.create(db, Identity(id=5, role="admin"))
        also_mine = store.create(db, Identity(id=5, role="admin"))
        theirs = store.create(db, Identity(id=6, role="user"))

        assert store.destroy_for_user(db, 5) == 2
        assert store.load(db, mine) is None
        assert store.load(db, also_mine) is None
        assert store.load(db, theirs) == {"id": 6, "role": "user"}
    finally:
        db.close()
