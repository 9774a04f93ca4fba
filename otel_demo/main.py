from __future__ import annotations

import structlog
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from otel_demo import __version__
from otel_demo.api.metrics import router as metrics_router
from otel_demo.api.payments import router as payments_router
from otel_demo.api.requests import router as requests_router
from otel_demo.config import Settings, get_settings
from otel_demo.models.schemas import HealthResponse
from otel_demo.observability import bridge
from otel_demo.observability.logging import configure_logging
from otel_demo.observability.middleware import RequestContextMiddleware
from otel_demo.observability.telemetry import TelemetryProvider, build_telemetry


def create_app(settings: Settings | None = None, telemetry: TelemetryProvider | None = None) -> FastAPI:
    """Build the ASGI app.

    The log bridge is installed here, before the app is handed to the server, so the
    first request already logs with trace correlation.
    """

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if telemetry is None:
        telemetry = build_telemetry(settings)
    bridge.install(telemetry)

    app = FastAPI(title="OTel Demo", version=__version__)
    app.state.settings = settings
    app.state.telemetry = telemetry

    app.add_middleware(RequestContextMiddleware)
    app.include_router(requests_router)
    app.include_router(payments_router)
    app.include_router(metrics_router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse()

    @app.on_event("shutdown")
    def _shutdown() -> None:
        structlog.get_logger(__name__).info("shutting_down")
        bridge.uninstall()
        telemetry.shutdown()

    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=telemetry.tracer_provider,
        excluded_urls="/health$,/metrics$",
    )

    structlog.get_logger(__name__).info(
        "app_created",
        service_name=settings.service_name,
        process_delay_ms=settings.process_delay_ms,
    )
    return app
