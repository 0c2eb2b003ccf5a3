"""
Notes API: FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() returns a configured FastAPI instance; the module-level
       ``app`` is what ``uvicorn notes_api.main:app`` serves, and ``run()``
       backs the ``notes-api`` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:      /notes (CRUD)        /health          │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFoundError→404           │
    │    InternalError→500    anything else→500           │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Build the Database and make the single connection attempt
    3. Build NoteRepository and NoteService onto app.state
    Shutdown:
    1. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notes_api import __version__
from notes_api.config import Settings, settings as default_settings
from notes_api.database import Database
from notes_api.exceptions import (
    InternalError,
    NotesAPIError,
    NotFoundError,
    ValidationError,
)
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.middleware.request_id import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    request_id_var,
)
from notes_api.repositories.note_repository import NoteRepository
from notes_api.routes import health, notes
from notes_api.schemas.note import ErrorEnvelope
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s] %(message)s
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(app_settings: Settings):
    """Lifespan bound to one Settings instance."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(app_settings.log_level)
        logger.info("Notes API %s starting up...", __version__)

        database = Database.from_settings(app_settings)
        await database.connect()

        app.state.database = database
        app.state.note_service = NoteService(NoteRepository(database))

        logger.info(
            "Server ready at http://%s:%d (database %s)",
            app_settings.backend_host,
            app_settings.backend_port,
            "connected" if database.is_connected else "disconnected",
        )

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("Notes API shutting down...")
        await database.dispose()
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _envelope(status_code: int, message: str, error: str) -> JSONResponse:
    headers = {}
    rid = request_id_var.get("")
    if rid:
        headers["X-Request-ID"] = rid
    body = ErrorEnvelope(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to failure envelopes.

    Handler hierarchy:
        ValidationError         → 400
        RequestValidationError  → 400 (malformed JSON, wrong field types)
        NotFoundError           → 404
        InternalError           → 500 (underlying error text included)
        NotesAPIError (base)    → its status_code
        Exception (fallback)    → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error: %s (%s)", exc.message, exc.error)
        return _envelope(400, exc.message, exc.error)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        logger.warning("Invalid request body: %s", details)
        return _envelope(400, "Invalid request body", details or "Request could not be parsed")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _envelope(404, exc.message, exc.error)

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        logger.error("%s: %s | Context: %s", exc.message, exc.error, exc.context)
        return _envelope(500, exc.message, exc.error)

    @app.exception_handler(NotesAPIError)
    async def handle_api_error(request: Request, exc: NotesAPIError):
        return _envelope(exc.status_code, exc.message, exc.error)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return _envelope(500, "Internal server error", str(exc) or type(exc).__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; the module-level singleton when None.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Notes API",
        description="Create, list, read, update and delete text notes.",
        version=__version__,
        lifespan=build_lifespan(app_settings),
    )
    app.state.settings = app_settings

    # Middleware executes in reverse order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Entry point for the ``notes-api`` console script."""
    import uvicorn

    uvicorn.run(
        "notes_api.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )
