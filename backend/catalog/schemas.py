# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the catalog endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# -- Requests --------------------------------------------------------------
# discount_price is derived server-side and never accepted from the client.


class ProductCreate(BaseModel):
    title: str
    description: str
    price: float = Field(ge=1, le=10000)
    discount_percentage: float = Field(0, ge=0, le=99)
    rating: float = Field(0, ge=0, le=5)
    stock: int = Field(0, ge=0)
    brand: str
    category: str
    thumbnail: str
    images: List[str] = []
    colors: List[str] = []
    sizes: List[str] = []
    highlights: List[str] = []


class ProductUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=1, le=10000)
    discount_percentage: Optional[float] = Field(None, ge=0, le=99)
    rating: Optional[float] = Field(None, ge=0, le=5)
    stock: Optional[int] = Field(None, ge=0)
    brand: Optional[str] = None
    category: Optional[str] = None
    thumbnail: Optional[str] = None
    images: Optional[List[str]] = None
    colors: Optional[List[str]] = None
    sizes: Optional[List[str]] = None
    highlights: Optional[List[str]] = None
    deleted: Optional[bool] = None


class OptionCreate(BaseModel):
    label: str
    value: str


# -- Responses -------------------------------------------------------------


class ProductResponse(BaseModel):
    id: int
    title: str
    description: str
    price: float
    discount_percentage: float
    discount_price: Optional[int]
    rating: float
    stock: int
    brand: str
    category: str
    thumbnail: str
    images: List[str]
    colors: List[str]
    sizes: List[str]
    highlights: List[str]
    deleted: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OptionResponse(BaseModel):
    id: int
    label: str
    value: str

    model_config = {"from_attributes": True}
