"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.farmconnect.api.http.app_data import ApplicationDependencies
from src.farmconnect.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness check: 200 as long as the process is serving requests."""
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness check covering the database and session storage.

    Returns 503 when the database is unavailable. Session storage is reported
    but never fails the check, since the in-memory store is a valid fallback.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    db_healthy = app_deps.database_service.health_check()
    checks["database"] = {
        "status": "healthy" if db_healthy else "unhealthy",
        "type": "sqlite" if config.database.is_sqlite else "postgresql",
    }
    if not db_healthy:
        all_healthy = False

    try:
        storage_healthy = await app_deps.session_storage.ping()
        checks["session_storage"] = {
            "status": "healthy" if storage_healthy else "degraded",
            "type": type(app_deps.session_storage).__name__,
        }
    except Exception as e:
        checks["session_storage"] = {
            "status": "degraded",
            "type": type(app_deps.session_storage).__name__,
            "error": str(e),
        }

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }
    if not all_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
