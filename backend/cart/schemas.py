# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the cart endpoints."""

from typing import Optional

from pydantic import BaseModel, Field

from catalog.schemas import ProductResponse


# -- Requests --------------------------------------------------------------
# The owner is always the authenticated caller; user_id is never accepted
# from the client.


class CartItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


class CartItemUpdate(BaseModel):
    quantity: Optional[int] = Field(None, ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


# -- Responses -------------------------------------------------------------


class CartItemResponse(BaseModel):
    id: int
    user_id: int
    quantity: int
    size: Optional[str]
    color: Optional[str]
    product: ProductResponse

    model_config = {"from_attributes": True}
