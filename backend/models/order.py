# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Order ORM model."""

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func

from database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Snapshot of the ordered lines at checkout time; later catalog edits
    # do not rewrite history.
    items = Column(JSON, nullable=False)
    total_amount = Column(Float, nullable=False)
    total_items = Column(Integer, nullable=False)
    payment_method = Column(String(16), nullable=False)                      # "card" | "cash"
    payment_status = Column(String(16), nullable=False, default="pending")  # "pending" | "received"
    status = Column(String(32), nullable=False, default="pending", index=True)
    selected_address = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
