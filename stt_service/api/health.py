"""Health check and system info routes."""

import logging

from fastapi import APIRouter
from sqlalchemy import text

from stt_service.config import get_settings
from stt_service.db.models import JobStatus
from stt_service.schemas.schemas import MAX_PAGE_SIZE, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])

settings = get_settings()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the service and its database.",
)
async def health_check():
    """Health check endpoint."""
    from stt_service.db.session import engine

    db_status = "ok"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        db_status = "error"

    return HealthResponse(
        status="healthy" if db_status == "ok" else "degraded",
        version="1.0.0",
        database=db_status,
    )


@router.get(
    "/v1/info",
    summary="Service information",
    description="Get general information about the service.",
)
async def service_info():
    """Get service information."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "environment": settings.app_env,
        "job_statuses": [s.value for s in JobStatus],
        "max_page_size": MAX_PAGE_SIZE,
        "documentation": "/docs",
        "redoc": "/redoc",
    }
