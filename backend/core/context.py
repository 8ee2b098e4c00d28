# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Application context – every long-lived resource the handlers need.

One ``AppContext`` is built per application by ``main.create_app`` and
stored on ``app.state.context``.  Handlers reach it through the
``get_context`` / ``get_db`` dependencies, never through module globals.
"""

from datetime import timedelta

from fastapi import Request

from auth.session import SessionStore
from core.config import Settings
from core.logger import logger
from database import Database
from payments.gateway import PaymentGateway


class AppContext:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.db = Database(settings.database_url)
        self.sessions = SessionStore(timedelta(days=settings.session_max_age_days))
        self.payments = PaymentGateway(
            settings.stripe_server_key,
            settings.webhook_endpoint,
            currency=settings.currency,
        )

    def startup(self) -> None:
        db = self.db.SessionLocal()
        try:
            removed = self.sessions.purge_expired(db)
        finally:
            db.close()
        logger.info("Purged %d expired session(s)", removed)

    def shutdown(self) -> None:
        self.db.dispose()


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context owned by the running app."""
    return request.app.state.context
