# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Auth endpoints – signup, login, token check, logout.

Security notes
--------------
* Login returns the *same* error message whether the email doesn't exist or
  the password is wrong.  This prevents user-enumeration attacks.
* A successful signup or login opens a server-side session (``sid`` cookie)
  *and* issues a signed token (``jwt`` cookie).  Either one satisfies the
  route guards.
* Key derivation and every database call run in the thread pool so the
  event loop keeps serving other requests while PBKDF2 grinds.
"""

import re
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from database import get_db
from core.context import AppContext, get_context
from core.logger import logger
from core.security import create_access_token, hash_password, sanitize_user, sign_session_id, unsign_session_id
from models.user import User
from auth.session import SESSION_COOKIE, set_session_cookie
from auth.strategies import (
    INVALID_CREDENTIALS,
    MISSING_CREDENTIALS,
    TOKEN_COOKIE,
    Denial,
    Identity,
    LocalStrategy,
    TokenStrategy,
    set_token_cookie,
)
from auth.schemas import CheckResponse, SessionIdentity, SignupRequest

router = APIRouter(prefix="/auth", tags=["auth"])


def _validate_new_password(pw: str) -> str | None:
    """
    Return an error string if the password does not meet the minimum policy,
    or None if it is acceptable.

    Policy: >= 8 chars, at least one uppercase, one lowercase, one digit.
    """
    if len(pw) < 8:
        return "Password must be at least 8 characters"
    if not re.search(r"[A-Z]", pw):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", pw):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", pw):
        return "Password must contain at least one digit"
    return None


def _token_ttl(ctx: AppContext) -> timedelta | None:
    minutes = ctx.settings.token_expire_minutes
    return timedelta(minutes=minutes) if minutes else None


def _open_session(identity: Identity, response: Response, db: Session, ctx: AppContext) -> None:
    """Persist the session, then hand both cookies to the browser."""
    session_id = ctx.sessions.create(db, identity)
    set_session_cookie(
        response,
        sign_session_id(session_id, ctx.settings.session_key),
        int(ctx.sessions.max_age.total_seconds()),
        ctx.settings.cookie_secure,
    )
    set_token_cookie(
        response,
        identity.token,
        ctx.settings.token_cookie_max_age,
        ctx.settings.cookie_secure,
    )


# ---------------------------------------------------------------------------
# POST /auth/signup
# ---------------------------------------------------------------------------


@router.post("/signup", response_model=SessionIdentity, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Create an account and log it in straight away."""
    err = _validate_new_password(body.password)
    if err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=err)

    if db.query(User).filter(User.email == body.email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already exists",
        )

    # Plain def handler, so this runs in the thread pool
    password_hash, salt = hash_password(body.password)
    user = User(
        email=body.email,
        password_hash=password_hash,
        salt=salt,
        role="user",
        name=body.name,
        addresses=[],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("New account id=%d", user.id)

    token = create_access_token(sanitize_user(user), ctx.settings.jwt_secret_key, _token_ttl(ctx))
    identity = Identity(id=user.id, role=user.role, email=user.email, token=token)
    _open_session(identity, response, db, ctx)
    return SessionIdentity(id=identity.id, role=identity.role)


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=SessionIdentity, status_code=status.HTTP_201_CREATED)
async def login(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Verify email + password; open a session and set the token cookie."""
    strategy = LocalStrategy(ctx.settings.jwt_secret_key, _token_ttl(ctx))
    result = await strategy.authenticate(request, db)

    if isinstance(result, Denial):
        code = (
            status.HTTP_400_BAD_REQUEST
            if result.reason == MISSING_CREDENTIALS
            else status.HTTP_401_UNAUTHORIZED
        )
        raise HTTPException(status_code=code, detail=result.reason)

    await run_in_threadpool(_open_session, result, response, db, ctx)
    logger.info("Login id=%d", result.id)
    return SessionIdentity(id=result.id, role=result.role)


# ---------------------------------------------------------------------------
# GET /auth/check
# ---------------------------------------------------------------------------


@router.get("/check", response_model=CheckResponse)
async def check(
    request: Request,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Resolve the ``jwt`` cookie back to the sanitized user."""
    result = await TokenStrategy(ctx.settings.jwt_secret_key).authenticate(request, db)
    if isinstance(result, Denial):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
    return result.public()


# ---------------------------------------------------------------------------
# GET /auth/logout
# ---------------------------------------------------------------------------


@router.get("/logout")
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Drop the server-side session (if any) and clear both cookies."""
    signed = request.cookies.get(SESSION_COOKIE)
    session_id = unsign_session_id(signed, ctx.settings.session_key) if signed else None
    if session_id:
        ctx.sessions.destroy(db, session_id)
    ctx.sessions.purge_expired(db)

    response.delete_cookie(SESSION_COOKIE)
    response.delete_cookie(TOKEN_COOKIE)
    return {"detail": "Logged out"}
