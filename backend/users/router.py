# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
User endpoints – own profile and profile updates.

The session only stores ``{id, role}``, so these handlers re-query the user
row whenever the full profile is needed.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from auth.guards import require_auth
from auth.strategies import Identity
from core.context import AppContext, get_context
from core.logger import logger
from models.user import User
from users.schemas import UserInfoResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_auth)])

_VALID_ROLES = {"admin", "user"}


# ---------------------------------------------------------------------------
# GET /users/own
# ---------------------------------------------------------------------------


@router.get("/own", response_model=UserInfoResponse)
def fetch_own(
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
):
    """Return the authenticated user's public profile (no secrets)."""
    user = db.query(User).filter(User.id == identity.id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# ---------------------------------------------------------------------------
# PATCH /users/{id}
# ---------------------------------------------------------------------------


@router.patch("/{user_id}", response_model=UserInfoResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    identity: Identity = Depends(require_auth),
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """
    Update name / addresses.  Guards:
    * Only the user themself or an admin may edit a profile.
    * Only an admin may change a role, and never their own.
    * A role change signs the target out of every open session.
    """
    is_admin = identity.role == "admin"
    if user_id != identity.id and not is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if "role" in changes:
        if not is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
        if changes["role"] not in _VALID_ROLES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid role. Must be 'admin' or 'user'",
            )
        if user_id == identity.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot change your own role",
            )

    role_changed = "role" in changes and changes["role"] != target.role
    for field, value in changes.items():
        setattr(target, field, value)
    db.commit()

    if role_changed:
        # Sessions cache the role, so they must not outlive it
        dropped = ctx.sessions.destroy_for_user(db, target.id)
        logger.info("Role of user id=%d changed to %s, %d session(s) closed", target.id, target.role, dropped)
    db.refresh(target)
    return target
