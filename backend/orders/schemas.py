# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the order endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from users.schemas import Address

OrderStatus = Literal["pending", "dispatched", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "received"]


class OrderLine(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)
    title: Optional[str] = None
    price: Optional[float] = None
    size: Optional[str] = None
    color: Optional[str] = None


# -- Requests --------------------------------------------------------------


class OrderCreate(BaseModel):
    items: List[OrderLine] = Field(min_length=1)
    total_amount: float = Field(gt=0)
    total_items: int = Field(ge=1)
    payment_method: Literal["card", "cash"]
    selected_address: Address


class OrderUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None


# -- Responses -------------------------------------------------------------


class OrderResponse(BaseModel):
    id: int
    user_id: int
    items: List[OrderLine]
    total_amount: float
    total_items: int
    payment_method: str
    payment_status: str
    status: str
    selected_address: Address
    created_at: datetime

    model_config = {"from_attributes": True}
