# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Authentication strategies.

There are exactly two ways to prove who you are:

* ``LocalStrategy``  – email + password from the JSON body of /auth/login.
* ``TokenStrategy``  – the signed JWT carried in the ``jwt`` cookie.

Both expose ``await strategy.authenticate(request, db)`` and return either
an :class:`Identity` or a :class:`Denial`.  A denial never says *why* the
credentials were wrong beyond "invalid credentials", so callers cannot
probe which e-mail addresses are registered.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

from fastapi import Request, Response
from jwt import InvalidTokenError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from core.security import (
    create_access_token,
    decode_access_token,
    derive_password_hash,
    generate_salt,
    passwords_match,
    sanitize_user,
)
from models.user import User

INVALID_CREDENTIALS = "invalid credentials"
MISSING_CREDENTIALS = "missing credentials"
TOKEN_COOKIE = "jwt"


class AuthenticationError(Exception):
    """Credential lookup or key derivation failed for a reason other than bad input."""


@dataclass(frozen=True)
class Identity:
    id: int
    role: str
    email: Optional[str] = None
    # Only set right after a successful local login
    token: Optional[str] = None

    def public(self) -> dict:
        data = {"id": self.id, "role": self.role}
        if self.email is not None:
            data["email"] = self.email
        return data


@dataclass(frozen=True)
class Denial:
    reason: str = INVALID_CREDENTIALS


AuthResult = Union[Identity, Denial]


# ---------------------------------------------------------------------------
# Local (email + password)
# ---------------------------------------------------------------------------


class LocalStrategy:
    name = "local"
    username_field = "email"

    def __init__(self, jwt_secret: str, token_ttl: Optional[timedelta] = None):
        self.jwt_secret = jwt_secret
        self.token_ttl = token_ttl

    async def authenticate(self, request: Request, db: Session) -> AuthResult:
        try:
            body = await request.json()
        except ValueError:
            return Denial(MISSING_CREDENTIALS)
        if not isinstance(body, dict):
            return Denial(MISSING_CREDENTIALS)

        email = body.get(self.username_field)
        password = body.get("password")
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            return Denial(MISSING_CREDENTIALS)

        try:
            user = await run_in_threadpool(self._lookup, db, email)
            if user is None:
                # Burn the same derivation cost so response time does not
                # reveal whether the address exists.
                await run_in_threadpool(derive_password_hash, password, generate_salt())
                return Denial()

            derived = await run_in_threadpool(derive_password_hash, password, user.salt)
            if not passwords_match(derived, user.password_hash):
                return Denial()
        except (SQLAlchemyError, ValueError, TypeError) as exc:
            raise AuthenticationError("credential verification failed") from exc

        token = create_access_token(sanitize_user(user), self.jwt_secret, self.token_ttl)
        return Identity(id=user.id, role=user.role, email=user.email, token=token)

    def _lookup(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()


# ---------------------------------------------------------------------------
# Token (jwt cookie)
# ---------------------------------------------------------------------------


def cookie_extractor(request: Request) -> Optional[str]:
    return request.cookies.get(TOKEN_COOKIE) or None


def set_token_cookie(response: Response, token: str, max_age: int, secure: bool) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=max_age,
        httponly=True,
        secure=secure,
        samesite="lax",
    )


class TokenStrategy:
    name = "jwt"

    def __init__(self, jwt_secret: str):
        self.jwt_secret = jwt_secret

    async def authenticate(self, request: Request, db: Session) -> AuthResult:
        return await run_in_threadpool(self.verify, cookie_extractor(request), db)

    def verify(self, token: Optional[str], db: Session) -> AuthResult:
        """Blocking half of :meth:`authenticate`; safe to call from sync dependencies."""
        if token is None:
            return Denial("missing token")

        try:
            claims = decode_access_token(token, self.jwt_secret)
            user = db.get(User, int(claims["id"]))
        except (InvalidTokenError, KeyError, TypeError, ValueError, SQLAlchemyError):
            return Denial()

        if user is None:
            return Denial()
        return Identity(**sanitize_user(user))
