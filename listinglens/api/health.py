import logging

from fastapi import APIRouter
from fastapi.responses import Response

from listinglens.config import settings
from listinglens.core.metrics import get_metrics, get_metrics_content_type

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/health",
    summary="Liveness check",
    description="Returns HTTP 200 while the process is running. The resolver has no backing services, so there is no separate readiness probe.",
)
async def liveness():
    return {"status": "healthy", "marketplace": settings.MARKETPLACE_DOMAIN}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Resolution and per-strategy counters in Prometheus exposition format. Returns HTTP 404 when metrics are disabled.",
)
async def metrics():
    """Prometheus metrics endpoint."""
    if not settings.METRICS_ENABLED:
        return Response(content="Metrics disabled", status_code=404)

    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )
