# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the auth endpoints."""

from typing import Optional

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------


class SignupRequest(BaseModel):
    email: str
    password: str
    name: Optional[str] = None


# -- Responses -------------------------------------------------------------


class SessionIdentity(BaseModel):
    id: int
    role: str


class CheckResponse(BaseModel):
    id: int
    role: str
    email: str
