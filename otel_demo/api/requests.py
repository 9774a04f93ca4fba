from __future__ import annotations

import asyncio
from time import perf_counter

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from otel_demo.api.dependencies import get_app_settings
from otel_demo.config import Settings
from otel_demo.observability.metrics import get_metrics


router = APIRouter(tags=["requests"], default_response_class=PlainTextResponse)
logger = structlog.get_logger(__name__)


@router.get("/")
async def home() -> str:
    logger.info("home_requested")
    return "home"


# ``:path`` so an empty name or a percent-encoded slash still reaches the handler untouched.
@router.get("/welcome/{name:path}")
async def welcome(name: str) -> str:
    logger.info("welcome_requested", visitor=name)
    return "welcome " + name


@router.get("/process")
async def process(settings: Settings = Depends(get_app_settings)) -> str:
    logger.info("process_started", delay_ms=settings.process_delay_ms)

    start = perf_counter()
    # Simulated slow dependency; awaiting keeps the event loop free for other requests.
    await asyncio.sleep(settings.process_delay_seconds)
    elapsed_ms = (perf_counter() - start) * 1000.0

    get_metrics().observe_simulated_work(elapsed_ms=elapsed_ms)
    logger.info("process_completed", elapsed_ms=round(elapsed_ms, 2))
    return "processed"
