"""FastAPI application factory.

Creates and configures the FastAPI application with all routers,
middleware, and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.

Run with uvicorn's factory mode (the factory needs configuration, so
there is no module-level app instance):
    uvicorn mindwell.presentation.api.app:create_app --factory
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mindwell.presentation.api.exception_handlers import setup_exception_handlers
from mindwell.presentation.api.routers import auth_router
from mindwell.presentation.api.schemas.common import HealthResponse
from mindwell_config.settings import Settings, get_settings
from mindwell_identity.infrastructure.email import EmailService
from mindwell_identity.infrastructure.persistence.sqlalchemy import IdentityBase
from mindwell_identity.infrastructure.secrets import (
    InMemorySecretStore,
    RedisSecretStore,
)
from mindwell_identity.repositories import SecretStore, SecretStoreError


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str) -> None:
    """Configure application logging.

    Sets up logging for the mindwell packages with:
    - Console output with timestamps and module names
    - Configurable log level for mindwell modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    # Define log format
    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    # Set levels for our application
    for name in ("mindwell", "mindwell_auth", "mindwell_identity"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

# API version info
API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

# OpenAPI tags metadata for documentation
OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Accounts, sessions and account recovery.

**Registration & Login:**
- Sign up as a patient or therapist
- Login to obtain a session token (one active session per user)
- Continue as guest (24-hour session, no account)

**Email Verification:**
- A 6-digit code is emailed at signup (valid 10 minutes)
- Codes can be re-sent (rate limited)

**Password Reset:**
- Reset links are valid for 60 minutes
- A reset ends the user's active session

**Security:**
- Passwords are hashed with bcrypt
- Tokens are only honored while their server-side session is live
""",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


def _create_engine(database_url: str) -> AsyncEngine:
    """Create the shared async engine.

    In-memory SQLite needs a single shared connection so every session
    sees the same database.
    """
    if database_url.startswith("sqlite"):
        if ":memory:" in database_url:
            return create_async_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        # Ensure data directory exists for SQLite
        db_path = database_url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return create_async_engine(database_url)

    return create_async_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


def _create_secret_store(settings: Settings) -> SecretStore:
    if settings.secret_store_backend == "memory":
        logger.warning("Using in-memory secret store (single process only)")
        return InMemorySecretStore()
    return RedisSecretStore.from_url(settings.redis_url)


async def _init_database_schema(engine: AsyncEngine) -> None:
    """Initialize database schema (if not existent) and verify connectivity."""
    logger.info("Initializing database schema...")
    try:
        async with engine.begin() as conn:
            await conn.run_sync(IdentityBase.metadata.create_all)
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None

    logger.info("Database schema initialized successfully")


async def _check_secret_store(secret_store: SecretStore) -> None:
    try:
        await secret_store.ping()
    except SecretStoreError:
        logger.critical("Could not connect to the secret store.")
        raise SystemExit(1) from None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Creates the process-wide resources once, hands them to dependencies via
    ``app.state``, and releases them on shutdown.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting %s API v%s...", settings.app_name, API_VERSION)
    engine = _create_engine(settings.database_url)
    secret_store = _create_secret_store(settings)

    app.state.engine = engine
    app.state.session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    app.state.secret_store = secret_store
    app.state.email_service = EmailService(settings)

    try:
        await _init_database_schema(engine)
        await _check_secret_store(secret_store)
        yield
    finally:
        # Shutdown - dispose the shared engine and close the store
        logger.info("Shutting down %s API...", settings.app_name)
        await secret_store.close()
        await engine.dispose()
        logger.info("Database and secret store connections closed")


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all endpoints.

    Returns
    -------
    APIRouter with all v1 endpoints mounted.
    """
    v1_router = APIRouter()

    # Mount all routers under v1
    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure logging on first app creation (not on module import)
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description=(
            "Authentication backend: **accounts**, **sessions**, "
            "**email verification** and **password reset**."
        ),
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers for consistent error responses
    setup_exception_handlers(app)

    # Include versioned API router
    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    # Health check endpoint (unversioned - always accessible)
    @app.get("/health", tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Unversioned for load balancer/monitoring compatibility.
        """
        return HealthResponse(status="healthy", version=API_VERSION)

    # Root endpoint with API info
    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """API root endpoint with version information."""
        return {
            "name": f"{settings.app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_V1_PREFIX,
            "endpoints": {
                "health": "/health",
                "auth": f"{API_V1_PREFIX}/auth",
            },
        }

    return app
