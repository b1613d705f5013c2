from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - No empty-string values are accepted.
    - SQLite and local database fallbacks are not permitted.
    - JWT_SECRET and API_SECURITY_SECRET are always required.
    - SERPER_API_KEY is optional; without it checks use browser automation only.
    """

    from db.config import load_env_files

    load_env_files()

    errors: list[str] = []

    # --- APP_MODE -------------------------------------------------------
    app_mode = os.getenv("APP_MODE", "").strip().lower()
    if not app_mode:
        errors.append(
            "APP_MODE is not set. It must be explicitly set to 'cloud'."
        )
    elif app_mode != "cloud":
        errors.append(
            f"APP_MODE='{app_mode}' is not valid. Allowed values: ['cloud']."
        )

    # --- Database URL ---------------------------------------------------
    database_url = os.getenv("DATABASE_URL", "").strip()
    cloud_database_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    if not database_url and not cloud_database_url:
        errors.append(
            "No database URL configured. Set DATABASE_URL or CLOUD_DATABASE_URL. "
            "SQLite and local database fallbacks are not permitted."
        )

    # --- Secrets --------------------------------------------------------
    if not os.getenv("JWT_SECRET", "").strip():
        errors.append("JWT_SECRET is not set. Session cookies cannot be signed without it.")
    if not os.getenv("API_SECURITY_SECRET", "").strip():
        errors.append(
            "API_SECURITY_SECRET is not set. Request tokens for /check cannot be issued without it."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed. Missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Run SELECT 1 on a pooled connection. Raises RuntimeError when the DB is unreachable."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import get_engine

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.

    Does NOT auto-migrate; run 'alembic upgrade head' first.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch: %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot; release the browser and HTTP client on exit."""
    from app.config import get_app_settings

    log = logging.getLogger(__name__)
    log.info("Starting in %s mode", get_app_settings().mode)
    _check_db()
    log.info("Database connectivity confirmed")
    _check_schema()
    log.info("Database schema validated")

    from app.services.check_service import shutdown_check_resources

    try:
        yield
    finally:
        await shutdown_check_resources()
        log.info("Browser and primary API client closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Indexy API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import admin_router, auth_router, check_router, dashboard_router
    from app.errors import register_error_handlers

    register_error_handlers(application)
    application.include_router(check_router)
    application.include_router(auth_router)
    application.include_router(dashboard_router)
    application.include_router(admin_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
