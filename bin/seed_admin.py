# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first admin user.

Run once after the initial migration:
    python bin/seed_admin.py

The script reads FIRST_ADMIN_EMAIL and FIRST_ADMIN_PASSWORD from
etc/app.conf.  After the row is inserted those values are no longer used by
the application.  Signup only ever creates ``user`` accounts, so this is the
only way to obtain the first admin.
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/seed_admin.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import get_settings      # noqa: E402
from core.logger import logger            # noqa: E402
from core.security import hash_password   # noqa: E402
from database import Database             # noqa: E402
from models.user import User              # noqa: E402


def seed(settings=None) -> bool:
    """Insert the admin row.  Returns True when a row was created."""
    settings = settings or get_settings()
    if not settings.first_admin_email or not settings.first_admin_password:
        logger.warning("FIRST_ADMIN_EMAIL or FIRST_ADMIN_PASSWORD not set in etc/app.conf – nothing to do")
        return False

    database = Database(settings.database_url)
    db = database.SessionLocal()
    try:
        existing = db.query(User).filter(User.email == settings.first_admin_email).first()
        if existing:
            logger.info("Admin '%s' already exists – skipping", settings.first_admin_email)
            return False

        password_hash, salt = hash_password(settings.first_admin_password)
        db.add(User(
            email=settings.first_admin_email,
            password_hash=password_hash,
            salt=salt,
            role="admin",
            addresses=[],
        ))
        db.commit()
        logger.info("Admin '%s' created", settings.first_admin_email)
        return True
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    seed()
