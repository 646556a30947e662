"""
Contacts API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires settings, the storage session
       factory, middleware, exception handlers and routes into one app.
       Tests pass their own Settings and session factory; uvicorn imports
       the module-level `app` built from the environment.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────┐          │
    │  │  Req ID  │→│   Logging   │→│   CORS   │          │
    │  └──────────┘ └─────────────┘ └──────────┘          │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────┐ ┌─────────────┐         │
    │  │ /contacts, /v1/contacts│ │ GET /health │         │
    │  └────────────────────────┘ └─────────────┘         │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ ContactsAPIError → ERROR_STATUS_CODES lookup │   │
    │  │ Exception        → 500                       │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging; create tables when running on SQLite
    Shutdown: dispose the engine if this app created it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contacts_api import __version__
from contacts_api.config import Settings, settings as default_settings
from contacts_api.database import build_engine, build_session_factory, create_schema
from contacts_api.exceptions import (
    ContactNotFoundError,
    ContactsAPIError,
    DatabaseError,
    DuplicateContactResourceError,
    InvalidContactError,
    InvalidFilterOperatorError,
    PageOutOfRangeError,
)
from contacts_api.middleware.logging import RequestLoggingMiddleware
from contacts_api.middleware.request_id import RequestIDMiddleware, request_id_var
from contacts_api.routes import contacts, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Called once from the lifespan handler before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown procedures."""
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Contacts API %s starting up...", __version__)

    engine = app.state.engine
    if engine is not None and app_settings.is_sqlite:
        # PostgreSQL schemas are managed by Alembic
        await create_schema(engine)
        logger.info("SQLite schema ready")

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Contacts API shutting down...")
    if engine is not None:
        await engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

# Error kind → HTTP status. Subclasses resolve through their MRO.
ERROR_STATUS_CODES: Dict[Type[ContactsAPIError], int] = {
    InvalidContactError: 400,
    DuplicateContactResourceError: 400,
    InvalidFilterOperatorError: 400,
    ContactNotFoundError: 404,
    PageOutOfRangeError: 416,
    DatabaseError: 500,
}


def status_for(exc: ContactsAPIError) -> int:
    """Resolve the HTTP status for an application error (500 if unmapped)."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Client errors (4xx) return the exception's message and context.
    Server errors (5xx) return a generic message; details are logged only.
    """

    @app.exception_handler(ContactsAPIError)
    async def handle_contacts_api_error(request: Request, exc: ContactsAPIError):
        rid = request_id_var.get("")
        status = status_for(exc)

        if status >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return JSONResponse(
                status_code=status,
                content={
                    "error": exc.error_code,
                    "message": "An internal error occurred. Please try again later.",
                    "request_id": rid,
                },
            )

        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=status,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, stack trace logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-derived settings.
        session_factory: Storage collaborator. When omitted, an engine is
            built from settings.database_url and owned (disposed) by the app.

    Returns:
        Fully configured FastAPI instance.
    """
    settings = settings or default_settings

    engine = None
    if session_factory is None:
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)

    app = FastAPI(
        title="Contacts API",
        description=(
            "CRUD API for contacts with header-driven filtering, "
            "stable sorting and page-window pagination."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory

    # ── Middleware (last added = first to execute) ────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-Page-Total",
            "X-Page-Next",
            "X-Page-Prev",
            "Location",
        ],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Exception Handlers ────────────────────────────────────────────────
    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(contacts.router)
    app.include_router(contacts.router, prefix="/v1", include_in_schema=False)
    app.include_router(health.router)

    return app


# uvicorn entry point: `uvicorn contacts_api.main:app`
app = create_app()
