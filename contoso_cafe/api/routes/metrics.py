"""Prometheus scrape endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response

from contoso_cafe.observability.metrics import get_content_type, get_metrics

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Current turn, reservation, validation and service metrics."""
    return Response(content=get_metrics(), media_type=get_content_type())
