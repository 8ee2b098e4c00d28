# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Server-side session store and the user (de)serialisation hooks.

A session row holds the minimal identity ``{"id", "role"}`` and an expiry
timestamp.  The browser only ever holds the signed session id in the
``sid`` cookie.  Every authenticated request pushes ``expires_at`` forward
(rolling window); rows past their expiry are treated as absent and purged
on startup and logout.

All expiry comparisons are done in SQL so that drivers which drop tzinfo
on read (SQLite) behave the same as MySQL.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Response
from sqlalchemy.orm import Session

from auth.strategies import Identity
from core.security import new_session_id
from models.session import SessionRecord

SESSION_COOKIE = "sid"


def serialize_user(user) -> dict:
    """Reduce a user (row or identity) to what the session may store."""
    return {"id": user.id, "role": user.role}


def deserialize_user(data: dict):
    """Hand the stored identity back verbatim; no re-fetch of the user row."""
    return Identity(id=data["id"], role=data["role"])


def set_session_cookie(response: Response, signed_id: str, max_age: int, secure: bool) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        signed_id,
        max_age=max_age,
        httponly=True,
        secure=secure,
        samesite="lax",
    )


class SessionStore:
    def __init__(self, max_age: timedelta):
        self.max_age = max_age

    def _expiry(self) -> datetime:
        return datetime.now(timezone.utc) + self.max_age

    def create(self, db: Session, user) -> str:
        """Persist a new session for *user* and return its id."""
        record = SessionRecord(
            id=new_session_id(),
            data=serialize_user(user),
            expires_at=self._expiry(),
        )
        db.add(record)
        db.commit()
        return record.id

    def load(self, db: Session, session_id: str) -> Optional[dict]:
        """Return the stored identity for a live session, else None."""
        record = (
            db.query(SessionRecord)
            .filter(
                SessionRecord.id == session_id,
                SessionRecord.expires_at > datetime.now(timezone.utc),
            )
            .first()
        )
        return dict(record.data) if record else None

    def touch(self, db: Session, session_id: str) -> None:
        db.query(SessionRecord).filter(SessionRecord.id == session_id).update(
            {SessionRecord.expires_at: self._expiry()}, synchronize_session=False
        )
        db.commit()

    def destroy(self, db: Session, session_id: str) -> None:
        db.query(SessionRecord).filter(SessionRecord.id == session_id).delete(
            synchronize_session=False
        )
        db.commit()

    def destroy_for_user(self, db: Session, user_id: int) -> int:
        """Drop every session belonging to *user_id*; returns the number removed."""
        removed = (
            db.query(SessionRecord)
            .filter(SessionRecord.data["id"].as_integer() == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return removed

    def purge_expired(self, db: Session) -> int:
        """Delete every expired row; returns the number removed."""
        removed = (
            db.query(SessionRecord)
            .filter(SessionRecord.expires_at <= datetime.now(timezone.utc))
            .delete(synchronize_session=False)
        )
        db.commit()
        return removed
