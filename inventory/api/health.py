import logging
import os

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import make_url

from inventory.config import get_settings
from inventory.database import engine
from inventory.utils.cache import cache_service

router = APIRouter(prefix="/health", tags=["Health"])

logger = logging.getLogger(__name__)

settings = get_settings()


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if all services (DB, Redis) are ready."
)
def readiness_check():
    """
    Readiness check for all dependencies.

    Returns status of:
    - Database connection
    - Redis connection
    """
    checks = {
        "database": False,
        "redis": False
    }

    # Check database
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    # Check Redis
    try:
        cache_service.ping()
        checks["redis"] = True
    except Exception as e:
        checks["redis_error"] = str(e)

    # Determine overall status
    all_healthy = all([checks["database"], checks["redis"]])

    return {
        "status": "ready" if all_healthy else "not_ready",
        "checks": checks
    }


@router.get(
    "/db",
    summary="Database check",
    description="Run a trivial query and return the database server time."
)
def database_check():
    """Verify the database answers queries."""
    try:
        with engine.connect() as conn:
            server_time = conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
    except Exception as e:
        logger.error(f"Database check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "message": "Error al conectar con la base de datos",
            },
        )

    return {
        "status": "success",
        "message": "Conexión a la base de datos establecida correctamente",
        "server_time": str(server_time),
    }


@router.get(
    "/diagnostics",
    summary="Configuration diagnostics",
    description="Report the database target and connection status. Passwords are never shown."
)
def diagnostics():
    """Summarise configuration and connectivity for troubleshooting."""
    url = make_url(settings.DATABASE_URL)

    database = {"status": "connected", "error": None}
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        database = {"status": "connection_error", "error": str(e)}

    return {
        "status": "ok",
        "environment": os.getenv("ENVIRONMENT", "development"),
        "config": {
            "database_url": url.render_as_string(hide_password=True),
            "database_driver": url.drivername,
            "database_host": url.host,
            "database_name": url.database,
            "database_password": "set (hidden)" if url.password else "not set",
            "redis_url": make_url(settings.REDIS_URL).render_as_string(hide_password=True),
        },
        "database": database,
    }


@router.get(
    "/cache/stats",
    summary="Cache statistics",
    description="Get Redis cache statistics."
)
def cache_stats():
    """Get cache statistics."""
    try:
        return cache_service.info()
    except Exception as e:
        return {"error": str(e)}
