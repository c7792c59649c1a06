"""
PackTrack Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires settings → stores → PackageService onto app.state,
       registers middleware, exception handlers, routers and the static
       mount. Run with `uvicorn packtrack.main:app` or the `packtrack`
       console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      /api/packages   /health   /           │
    │  Static:      public/ mounted at "/" (uploads, UI)  │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 │ Forbidden→403 │ NotFound→404     │
    │   Conflict→409   │ Persistence/FileStorage→500      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, seed sample packages on first run,
              print the console banner.
    Shutdown: log only; there are no open connections to release.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from packtrack import __version__
from packtrack.config import Settings, settings as default_settings
from packtrack.exceptions import PackTrackError
from packtrack.middleware.logging import RequestLoggingMiddleware
from packtrack.middleware.request_id import RequestIDMiddleware, request_id_var
from packtrack.routes import health, packages, site
from packtrack.seed import SAMPLE_TRACKING_NUMBERS, sample_packages
from packtrack.services.image_store import ImageStore
from packtrack.services.package_service import PackageService
from packtrack.services.record_store import RecordStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """Configure the root logger once, before anything else logs."""
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # RequestLoggingMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    service: PackageService = app.state.package_service

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("PackTrack Backend starting up...")
    logger.info("Record document: %s", config.data_file)
    logger.info("Uploads directory: %s", config.uploads_dir)

    if config.seed_sample_packages:
        seeded = await service.seed_if_missing(sample_packages(config.placeholder_image))
        if seeded:
            logger.info("Created %s with %d sample packages", config.data_file.name, seeded)

    logger.info("Server running on http://localhost:%d", config.port)
    # Shown to operators of the client console; the API does not check it
    logger.info("Admin password: %s", config.admin_password)
    logger.info("Sample tracking numbers: %s", ", ".join(SAMPLE_TRACKING_NUMBERS))
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("PackTrack Backend shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map PackTrack exceptions to JSON error responses.

    Each PackTrackError subclass carries its own status_code and error_code.
    Server-side failures (5xx) keep their details in the log; the client
    only gets the exception's user-facing message.
    """

    @app.exception_handler(PackTrackError)
    async def handle_packtrack_error(request: Request, exc: PackTrackError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Override the module-level settings (used in tests).
    """
    config = app_settings or default_settings

    # StaticFiles refuses to mount a missing directory
    config.public_path.mkdir(parents=True, exist_ok=True)

    record_store = RecordStore(config.data_file)
    image_store = ImageStore(config.uploads_dir, url_prefix=config.uploads_subdir)
    package_service = PackageService(
        record_store=record_store,
        image_store=image_store,
        placeholder_image=config.placeholder_image,
    )

    app = FastAPI(
        title="PackTrack API",
        description="Package tracking records with events and optional images.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.package_service = package_service

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Store-Degraded"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(packages.router)
    app.include_router(health.router)
    app.include_router(site.router)

    # Must come last: the mount at "/" would otherwise shadow the API
    app.mount("/", StaticFiles(directory=str(config.public_path)), name="public")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    uvicorn.run(
        "packtrack.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
