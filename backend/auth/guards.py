# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI dependency guards.

``require_auth`` is attached at router level for every resource router, so
an unauthenticated request is answered with 401 before any handler (and
therefore any resource query) runs.

``current_identity`` is a plain function, so FastAPI runs it (and its
session and user queries) in the thread pool rather than on the event loop.

Resolution order: server-side session (``sid`` cookie) first, then the
signed token (``jwt`` cookie).
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from auth.session import SESSION_COOKIE, deserialize_user, set_session_cookie
from auth.strategies import Identity, TokenStrategy, cookie_extractor
from core.context import AppContext, get_context
from core.security import unsign_session_id
from database import get_db


def current_identity(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
) -> Optional[Identity]:
    """Return the caller's identity, or None when neither cookie checks out."""
    signed = request.cookies.get(SESSION_COOKIE)
    if signed:
        session_id = unsign_session_id(signed, ctx.settings.session_key)
        data = ctx.sessions.load(db, session_id) if session_id else None
        if data is not None:
            # Rolling expiry: every authenticated request extends the session
            ctx.sessions.touch(db, session_id)
            set_session_cookie(
                response,
                signed,
                int(ctx.sessions.max_age.total_seconds()),
                ctx.settings.cookie_secure,
            )
            return deserialize_user(data)

    result = TokenStrategy(ctx.settings.jwt_secret_key).verify(cookie_extractor(request), db)
    return result if isinstance(result, Identity) else None


def require_auth(identity: Optional[Identity] = Depends(current_identity)) -> Identity:
    """Dependency: 401 unless a session or token identity is present."""
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return identity


def require_admin(identity: Identity = Depends(require_auth)) -> Identity:
    """
    Dependency: wraps :func:`require_auth` and additionally asserts
    ``role == 'admin'``.  Raises 403 otherwise.
    """
    if identity.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return identity
