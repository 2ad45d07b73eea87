from typing import Any, Dict

from fastapi import APIRouter

from ...core.events import health_check_events
from ...core.setting import get_settings

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Liveness check; Kafka being down degrades but does not fail the service"""
    settings = get_settings()
    kafka_healthy = await health_check_events()
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy" if kafka_healthy else "degraded",
        "checks": {"kafka_publisher": kafka_healthy},
    }
