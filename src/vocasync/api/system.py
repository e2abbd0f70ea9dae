"""Health and Prometheus metrics endpoints."""
from fastapi import APIRouter, Response

from vocasync.monitoring import render_metrics

router = APIRouter()


@router.get("/health", summary="Liveness probe")
def health() -> dict:
    return {"status": "ok"}


@router.get("/metrics", summary="Prometheus metrics")
def metrics() -> Response:
    """Expose the default registry in Prometheus text format."""
    payload, content_type = render_metrics()
    return Response(content=payload, media_type=content_type)
