from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from otel_demo.models.schemas import Payment
from otel_demo.observability.metrics import get_metrics


router = APIRouter(tags=["payments"], default_response_class=PlainTextResponse)
logger = structlog.get_logger(__name__)


async def parse_payment(request: Request) -> Payment:
    body = await request.body()
    try:
        return Payment.model_validate_json(body)
    except ValidationError as exc:
        logger.warning("payment_rejected", error_count=exc.error_count())
        raise HTTPException(status_code=400, detail="Malformed payment payload") from exc


@router.post("/payment")
async def do_payment(request: Request) -> str:
    payment = await parse_payment(request)
    logger.info("payment_received", payment=str(payment))
    get_metrics().observe_payment()
    return "payment successful"
