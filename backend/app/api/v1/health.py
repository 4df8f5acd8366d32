"""
Liveness endpoints for load balancers and uptime checks.
"""
from fastapi import APIRouter

from app.core import settings
from app.core.datetime_utils import utc_now

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Report that the calculator is up, with the build and default mode.
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENV,
        "default_mode": settings.RCI_DEFAULT_MODE.value,
    }


@router.get("/ping")
async def ping():
    """Connectivity check with no dependencies."""
    return {"message": "pong"}
