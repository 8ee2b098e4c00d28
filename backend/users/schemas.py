# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the user endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class Address(BaseModel):
    name: str
    email: Optional[str] = None
    phone: str
    street: str
    city: str
    state: str
    pin_code: str


# -- Requests --------------------------------------------------------------


class UserUpdate(BaseModel):
    name: Optional[str] = None
    addresses: Optional[List[Address]] = None
    role: Optional[str] = None  # admin only


# -- Responses -------------------------------------------------------------
# No password_hash / salt: the schema is the allow-list of what leaves the API.


class UserInfoResponse(BaseModel):
    id: int
    email: str
    role: str
    name: Optional[str] = None
    addresses: List[Address] = []
    created_at: datetime

    model_config = {"from_attributes": True}
