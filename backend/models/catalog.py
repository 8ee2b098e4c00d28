# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Catalog ORM models – products, categories and brands."""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.sql import func

from database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    discount_percentage = Column(Float, nullable=False, default=0)
    # Derived from price and discount_percentage on every write
    discount_price = Column(Integer, nullable=True)
    rating = Column(Float, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    brand = Column(String(255), nullable=False, index=True)
    category = Column(String(255), nullable=False, index=True)
    thumbnail = Column(String(2048), nullable=False)
    images = Column(JSON, nullable=False, default=list)
    colors = Column(JSON, nullable=False, default=list)
    sizes = Column(JSON, nullable=False, default=list)
    highlights = Column(JSON, nullable=False, default=list)
    # Soft delete: hidden from regular users, still visible to admins
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def refresh_discount_price(self) -> None:
        self.discount_price = round(self.price * (1 - (self.discount_percentage or 0) / 100))


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(255), unique=True, nullable=False)
    value = Column(String(255), unique=True, nullable=False)


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(255), unique=True, nullable=False)
    value = Column(String(255), unique=True, nullable=False)
