from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from retailpos.app.api.v1.api import api_router
from retailpos.app.core.config import Settings, settings as default_settings
from retailpos.app.core.database import Store
from retailpos.app.core.errors import InvalidInput, POSError, Unauthenticated, Unexpected
from retailpos.app.middleware.rate_limit import InMemoryRateLimiter
from retailpos.app.middleware.request_id import RequestIDMiddleware

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ─── Error rendering ─────────────────────────────────────────────────────────


def _pos_error_handler(request: Request, exc: POSError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or "body"
    message = f"{field}: {first.get('msg', 'Invalid input')}"
    return JSONResponse(status_code=400, content=InvalidInput(field, message).to_dict())


def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = HTTPStatus(exc.status_code).phrase.replace(" ", "").replace("-", "")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "kind": kind},
        headers=getattr(exc, "headers", None),
    )


def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=Unexpected().to_dict())


# ─── Application factory ─────────────────────────────────────────────────────


def create_app(app_settings: Settings | None = None, store: Store | None = None) -> FastAPI:
    """Build the API. A *store* passed in is left open at shutdown; one built here is disposed."""
    app_settings = app_settings or default_settings
    _configure_logging(app_settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_store = store is None
        app.state.store = store or Store(app_settings.DATABASE_URL, echo=app_settings.SQL_ECHO)
        logger.info("Store ready: %s", app.state.store.engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            if owns_store:
                app.state.store.dispose()

    app = FastAPI(title="Retail POS", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.login_limiter = InMemoryRateLimiter(
        window_seconds=app_settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
        max_attempts=app_settings.LOGIN_RATE_LIMIT_ATTEMPTS,
    )
    if store is not None:
        app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(POSError, _pos_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(api_router)

    @app.get("/health", tags=["system"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
