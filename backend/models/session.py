# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Server-side session ORM model."""

from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from database import Base


class SessionRecord(Base):
    __tablename__ = "sessions"

    # Opaque random id; the client only ever sees it signed
    id = Column(String(64), primary_key=True)
    # Serialized identity {"id": ..., "role": ...} – never password material
    data = Column(JSON, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
