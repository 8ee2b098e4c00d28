# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""User ORM model."""

from sqlalchemy import Column, Integer, String, Enum, DateTime, JSON
from sqlalchemy.sql import func

from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # hex( PBKDF2-SHA256 derived key ) – never the plaintext
    password_hash = Column(String(255), nullable=False)
    # hex( 16 random bytes ), generated once at signup and never rotated
    salt = Column(String(255), nullable=False)
    role = Column(Enum("admin", "user", name="user_role"), nullable=False, default="user")
    name = Column(String(255), nullable=True)
    addresses = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
