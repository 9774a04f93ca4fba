from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from otel_demo.api.dependencies import get_app_settings
from otel_demo.config import Settings
from otel_demo.observability.metrics import get_metrics


router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(settings: Settings = Depends(get_app_settings)) -> dict:
    if not settings.enable_metrics_endpoint:
        raise HTTPException(status_code=404, detail="Not found")
    return get_metrics().snapshot()
