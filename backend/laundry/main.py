"""FastAPI application entry point."""

import json
import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import Engine
from starlette.middleware.base import BaseHTTPMiddleware

import laundry.models  # noqa: F401  (register all tables on Base.metadata)
from laundry.api.routes import api_router
from laundry.core.config import Settings, get_settings
from laundry.core.errors import register_error_handlers
from laundry.core.rate_limit import limiter
from laundry.db.base import Base
from laundry.db.session import build_engine, build_session_factory, ping

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("requests")

APP_VERSION = "1.0.0"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        })


def configure_logging(settings: Settings) -> None:
    """JSON records in production, human-readable lines in debug."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))
    root_logger.handlers.clear()

    if settings.debug:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())

    root_logger.addHandler(handler)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none';"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        # Skip logging for health checks and docs
        if request.url.path in ["/health", "/health/ready", "/docs", "/openapi.json"]:
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            request_logger.error(
                f"Error: {request.method} {request.url.path} - "
                f"Exception: {str(e)} - Time: {process_time:.3f}s - Client: {client_ip}"
            )
            raise

        process_time = time.time() - start_time
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        request_logger.log(
            log_level,
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.3f}s - Client: {client_ip}"
        )
        return response


def _ensure_sqlite_directory(engine: Engine) -> None:
    database = engine.url.database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings
    engine: Engine = app.state.engine
    logger.info(f"Starting Hospital Laundry Management API (auth mode: {settings.auth_mode})")

    # Migration tooling is out of scope; SQLite databases get their schema here
    if engine.dialect.name == "sqlite":
        _ensure_sqlite_directory(engine)
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (SQLite mode)")

    yield

    if app.state.owns_engine:
        engine.dispose()
    logger.info("Shutting down Hospital Laundry Management API")


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the application.

    The engine and session factory are created here, once, and kept on
    ``app.state`` so that request handlers receive sessions by injection.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    owns_engine = engine is None
    engine = engine or build_engine(settings.database_url)

    app = FastAPI(
        title="Hospital Laundry Management API",
        description="Laundry tasks, inventory, equipment maintenance and department billing",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.owns_engine = owns_engine
    app.state.session_factory = build_session_factory(engine)

    # Rate limiting setup
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_error_handlers(app)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware - added last so it runs first (Starlette LIFO order)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health_check():
        """Basic liveness check endpoint."""
        return {"status": "healthy", "version": APP_VERSION}

    @app.get("/health/ready")
    def readiness_check(request: Request):
        """Readiness check with a database connectivity test."""
        error = ping(request.app.state.session_factory)
        if error is not None:
            logger.error(f"Database health check failed: {error}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "checks": {"database": "unhealthy"}},
            )
        return {"status": "ready", "checks": {"database": "healthy"}}

    return app


app = create_app()
