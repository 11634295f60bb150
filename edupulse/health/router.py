"""Health check endpoints."""

from fastapi import APIRouter, Request, Response, status

from edupulse.config import get_settings


router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - the process is up."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(
    request: Request, response: Response
) -> dict[str, str | bool]:
    """Readiness probe - services are wired to a database session."""
    settings = get_settings()
    ready = getattr(request.app.state, "progress_service", None) is not None
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "ready" if ready else "unavailable",
        "environment": settings.environment,
        "debug": settings.debug,
        "database": ready,
    }


@router.get("")
async def health() -> dict[str, str]:
    """General health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }
