"""
Health check endpoint.
"""

from fastapi import APIRouter

from armory.application.dto.responses import HealthResponse
from armory.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service health.

    Reports ``degraded`` when the ledger database does not answer.
    """
    from armory.infrastructure.storage.sqlite import get_pool

    settings = get_settings()
    try:
        pool = await get_pool()
        database = await pool.ping()
    except Exception as e:
        logger.warning("health_db_check_failed", error=str(e))
        database = False

    return HealthResponse(
        status="ok" if database else "degraded",
        version=settings.app_version,
        database=database,
    )
