import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status

from quotebuilder.config import settings
from quotebuilder.core.uptime import format_uptime, process_uptime_seconds

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Liveness probe with the process uptime."""
    logger.debug("[Health] Health check requested")
    return {
        "status": status.HTTP_200_OK,
        "message": "Server is healthy",
        "uptime": format_uptime(process_uptime_seconds()),
        "date": datetime.now(timezone.utc),
        "supportEmail": settings.SUPPORT_EMAIL,
        "API Version": settings.API_VERSION,
    }
