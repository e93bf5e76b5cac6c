"""Health check and status endpoints"""
from fastapi import APIRouter
from datetime import datetime, timezone
from resource_api.models.schemas import HealthCheck
from resource_api.core.config import settings
from resource_api.db.session import ping_db
from resource_api.utils.logger import logger

router = APIRouter(tags=["Health"])


async def _database_reachable() -> bool:
    try:
        return await ping_db()
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        return False


@router.get("/", summary="Root Endpoint")
async def root():
    """Root endpoint - API welcome message"""
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health"
    }


@router.get("/health", response_model=HealthCheck, summary="Health Check")
async def health_check():
    """
    Check API health status and database availability.

    No authentication required.
    """
    reachable = await _database_reachable()
    return HealthCheck(
        status="healthy" if reachable else "degraded",
        timestamp=datetime.now(timezone.utc),
        database_reachable=reachable,
        version=settings.VERSION
    )
