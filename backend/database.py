# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
SQLAlchemy declarative base, the ``Database`` handle owned by the
application context, and the FastAPI dependency that provides a DB session
per request.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from fastapi import Request

Base = declarative_base()


class Database:
    """Engine plus session factory for one database URL."""

    def __init__(self, url: str):
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        # pool_pre_ping keeps idle connections alive across MySQL's wait_timeout
        self.engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create every table known to ``Base``.  Migrations do this in production."""
        # Import every ORM model so that Base.metadata knows about all tables.
        import models.user      # noqa: F401
        import models.session   # noqa: F401
        import models.catalog   # noqa: F401
        import models.cart      # noqa: F401
        import models.order     # noqa: F401

        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request):
    """
    FastAPI dependency.  Yields a session for the duration of the request,
    then closes it.  Use with Depends(get_db).
    """
    db = request.app.state.context.db.SessionLocal()
    try:
        yield db
    finally:
        db.close()
