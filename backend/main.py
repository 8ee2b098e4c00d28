# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Build the ``AppContext`` (database, session store, payment gateway) and
  tie its startup / shutdown to the app lifecycle.
* Register CORS and request-logging middleware.
* Mount the feature routers (auth, catalog, users, cart, orders, payments).
* Mount the storefront build so a single ``uvicorn`` process serves both the
  API and the single-page app.
* Expose a /health endpoint for container liveness checks.

Run with:
    uvicorn main:create_app --factory --app-dir backend
"""

import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from auth.router import router as auth_router
from auth.strategies import AuthenticationError
from cart.router import router as cart_router
from catalog.router import brands_router, categories_router, products_router
from core.config import Settings, get_settings
from core.context import AppContext
from core.logger import logger
from orders.router import router as orders_router
from payments.router import router as payments_router
from users.router import router as users_router

_FRONTEND_DIR = Path(__file__).resolve().parent.parent / "build"


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Request bodies (credentials, addresses) are never echoed.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


async def _authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    logger.exception("Authentication failed on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Authentication failed"})


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the application.  *context* wins over *settings*; with neither,
    settings come from etc/app.conf and the environment.
    """
    if context is None:
        context = AppContext(settings or get_settings())

    app = FastAPI(title="Shopfront", version="1.0.0")
    app.state.context = context

    # -----------------------------------------------------------------------
    # CORS
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=context.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type"],
        expose_headers=["X-Total-Count"],
    )
    app.add_middleware(_RequestLogMiddleware)

    app.add_exception_handler(AuthenticationError, _authentication_error_handler)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(categories_router)
    app.include_router(brands_router)
    app.include_router(users_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(payments_router)

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    @app.on_event("startup")
    async def _on_startup():
        logger.info("Shopfront service starting up")
        await run_in_threadpool(context.startup)

    @app.on_event("shutdown")
    async def _on_shutdown():
        logger.info("Shopfront service shutting down")
        await run_in_threadpool(context.shutdown)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # -----------------------------------------------------------------------
    # Static files – storefront build
    # -----------------------------------------------------------------------
    # Mounted *after* the API routers.  Unknown paths fall back to
    # index.html so client-side routes survive a page reload.
    if _FRONTEND_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(_FRONTEND_DIR / "static"), check_dir=False), name="static")

        @app.get("/{full_path:path}", include_in_schema=False)
        def spa_fallback(full_path: str):
            candidate = (_FRONTEND_DIR / full_path).resolve()
            if full_path and candidate.is_file() and _FRONTEND_DIR in candidate.parents:
                return FileResponse(candidate)
            return FileResponse(_FRONTEND_DIR / "index.html")

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=get_settings().port)
