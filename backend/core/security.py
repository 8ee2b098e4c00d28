# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives live here.  No other
module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_hmac, consteq)
2. JWT creation / decoding                  (PyJWT / HS256)
3. Session-id cookie signing                (itsdangerous)
4. User sanitisation for tokens and responses
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt as _jwt        # PyJWT
from itsdangerous import BadSignature, Signer
from passlib.crypto.digest import pbkdf2_hmac
from passlib.utils import consteq

# ---------------------------------------------------------------------------
# 1.  PBKDF2-HMAC-SHA256 – password hashing
# ---------------------------------------------------------------------------
# The salt is kept in its own column (hex) rather than embedded in a
# modular-crypt string, so existing rows created with these exact
# parameters keep verifying.
# ---------------------------------------------------------------------------

PBKDF2_DIGEST = "sha256"
PBKDF2_ROUNDS = 310_000
PBKDF2_KEYLEN = 32
SALT_BYTES = 16


def generate_salt() -> str:
    """Return a fresh random salt, hex-encoded."""
    return secrets.token_hex(SALT_BYTES)


def derive_password_hash(plain: str, salt: str) -> bytes:
    """
    Derive the 32-byte PBKDF2-SHA256 key for *plain* under *salt*.

    CPU-bound (310 000 rounds): call it through ``run_in_threadpool`` from
    async code.
    """
    return pbkdf2_hmac(PBKDF2_DIGEST, plain, bytes.fromhex(salt), PBKDF2_ROUNDS, PBKDF2_KEYLEN)


def hash_password(plain: str) -> tuple[str, str]:
    """
    Hash a plaintext password with a newly generated salt.

    Returns
    -------
    password_hash : str   hex( derived key )
    salt          : str   hex( 16 random bytes )
    """
    salt = generate_salt()
    return derive_password_hash(plain, salt).hex(), salt


def passwords_match(derived: bytes, stored_hash: str) -> bool:
    """Constant-time comparison of a derived key against the stored hex hash."""
    return consteq(derived, bytes.fromhex(stored_hash))


def verify_password(plain: str, stored_hash: str, salt: str) -> bool:
    return passwords_match(derive_password_hash(plain, salt), stored_hash)


# ---------------------------------------------------------------------------
# 2.  JWT – signed tokens
# ---------------------------------------------------------------------------

JWT_ALGORITHM = "HS256"


def sanitize_user(user) -> dict:
    """
    Reduce a User row to the claims that may leave the server.
    Never includes ``password_hash`` or ``salt``.
    """
    return {"id": user.id, "role": user.role, "email": user.email}


def create_access_token(
    data: dict,
    secret: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a JWT with HS256.

    *data* is normally the output of :func:`sanitize_user`.  An ``exp``
    claim is added only when *expires_delta* is given.
    """
    to_encode = data.copy()
    if expires_delta is not None:
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return _jwt.encode(to_encode, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> dict:
    """
    Decode and verify a JWT.  Raises ``jwt.InvalidTokenError`` (or a
    subclass such as ``ExpiredSignatureError``) on any failure.
    """
    return _jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])


# ---------------------------------------------------------------------------
# 3.  Session-id cookie signing
# ---------------------------------------------------------------------------


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


def sign_session_id(session_id: str, secret: str) -> str:
    return Signer(secret, salt="shopfront.session").sign(session_id).decode("ascii")


def unsign_session_id(value: str, secret: str) -> Optional[str]:
    """Return the bare session id, or None when the signature does not match."""
    try:
        return Signer(secret, salt="shopfront.session").unsign(value).decode("ascii")
    except BadSignature:
        return None
