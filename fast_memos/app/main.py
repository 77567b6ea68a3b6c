"""
Main entrypoint for the Fast Memos API.

This module assembles the FastAPI application: logging, the shared
storage handle and token service, error mapping, middleware and the
versioned routers.  ``create_app`` builds and configures the app, which is
then instantiated at module import time as ``app``, e.g.::

    uvicorn fast_memos.app.main:app --reload
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import Database, init_db
from .core.errors import AuthError, FastMemosError
from .core.logging_config import setup_logging
from .core.security import TokenService

logger = logging.getLogger(__name__)


def describe_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Flatten FastAPI's request validation errors into one message."""
    parts = []
    for err in errors:
        if err.get("type") == "json_invalid":
            parts.append("Request body is not valid JSON")
            continue
        field = ".".join(str(p) for p in err.get("loc", ())[1:])
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "Invalid request: " + "; ".join(parts or ["malformed input"])


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the module-level ``settings``.  Tests
        pass an instance pointing at a temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    cfg = app_settings or settings
    # Logging first so that everything below can log.
    setup_logging(cfg.log_level, cfg.log_file or None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Creates the database file if needed and applies migrations.
        init_db(app.state.db)
        yield

    app = FastAPI(
        title=cfg.project_name,
        version=cfg.api_version,
        debug=cfg.debug,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.db = Database(cfg.database_url)
    app.state.tokens = TokenService(
        cfg.secret_key,
        expire_minutes=cfg.access_token_expire_minutes,
        algorithm=cfg.algorithm,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origin_list,
        allow_methods=["GET", "POST", "HEAD", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    @app.exception_handler(FastMemosError)
    async def handle_app_error(request: Request, exc: FastMemosError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed or mistyped input is a client error like any other ValidationError.
        return JSONResponse(status_code=400, content={"detail": describe_validation_errors(exc.errors())})

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
