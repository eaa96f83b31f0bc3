"""
Habit Tracker Backend — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database (or takes one), wraps it in the
       single HabitStore shared by every request, registers middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (`habittracker.main:app`), `python -m habittracker`, tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/habits  │ │ /api/admin/* │ │ /api/health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                    (flag-gated)                     │
    │  Exception Handlers:                                │
    │  ValidationError → 400 │ StoreError → 500           │
    │                                                     │
    │  app.state: settings, database, store               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create missing tables, log listen address
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from habittracker import __version__
from habittracker.config import Settings, settings as default_settings
from habittracker.database import Database
from habittracker.exceptions import HabitTrackerError, StoreError, ValidationError
from habittracker.middleware.logging import RequestLoggingMiddleware
from habittracker.middleware.request_id import RequestIDMiddleware, request_id_var
from habittracker.routes import admin, habits, health
from habittracker.services.habit_store import HabitStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Habit tracker backend %s starting up", __version__)

    if config.create_tables_on_startup:
        try:
            await database.create_all()
        except Exception as e:
            # Keep serving: health reports the store as disconnected and
            # every store call fails with StoreError until it comes back.
            logger.error("Could not prepare habit store: %s", str(e))
        else:
            logger.info("Habit store ready (%s)", database.engine.url.render_as_string(hide_password=True))

    if config.admin_endpoints_enabled:
        logger.warning("Admin endpoints enabled at /api/admin (no authentication)")

    logger.info("Server ready at http://%s:%d", config.host, config.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Habit tracker backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def request_validation_to_error(exc: RequestValidationError) -> ValidationError:
    """
    Convert FastAPI's error list into a ValidationError.

    The message reads 'Habit validation failed: field: msg, ...'; `field` is
    the first offending field, e.g. "text" or "habits.0.id".
    """
    parts = []
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = ".".join(loc)
        msg = error.get("msg", "invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
        if field:
            fields.append(field)
    return ValidationError(
        message="Habit validation failed: " + ", ".join(parts),
        field=fields[0] if fields else None,
        context={"fields": fields},
    )


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": request_id_var.get("")},
    )


def _validation_response(exc: ValidationError) -> JSONResponse:
    logger.warning(
        "[%s] Validation error: %s | Context: %s",
        request_id_var.get(""),
        exc.message,
        exc.context,
    )
    return _error_response(400, exc.message)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError, RequestValidationError → 400
        StoreError                              → 500
        HabitTrackerError (base)                → 500
        Exception (fallback)                    → 500

    Request validation failures are converted to ValidationError first, so
    every 400 leaves through one path. The message in the body is the
    underlying message, unfiltered.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return _validation_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return _validation_response(request_validation_to_error(exc))

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        logger.error(
            "[%s] Store error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, exc.message)

    @app.exception_handler(HabitTrackerError)
    async def handle_app_error(request: Request, exc: HabitTrackerError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(500, str(exc) or type(exc).__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded singleton.
        database: Store handle; built from `settings` when omitted. Tests pass
                  one bound to a temporary SQLite file.
    """
    settings = settings or default_settings
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title="Habit Tracker API",
        description="Stores per-user habit records and syncs them for the habit tracker clients.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.store = HabitStore(database)

    # ── Middleware (last added runs first) ────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(habits.router)
    app.include_router(health.router)
    if settings.admin_endpoints_enabled:
        app.include_router(admin.router)

    return app


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    uvicorn.run(
        "habittracker.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `habittracker.main:app` to be importable
app = create_app()
