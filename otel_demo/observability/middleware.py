from __future__ import annotations

import uuid
from time import perf_counter
from typing import Any, Callable

import structlog
from opentelemetry import trace
from starlette.datastructures import Headers, MutableHeaders

from otel_demo.observability.metrics import get_metrics


def _current_trace_id() -> str | None:
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        return format(ctx.trace_id, "032x")
    return None


class RequestContextMiddleware:
    """Binds request_id into log context, writes the access log and HTTP metrics.

    Runs inside the OpenTelemetry server span, so the access log and the
    ``X-Trace-ID`` response header refer to the request's trace.
    """

    def __init__(self, app: Callable[..., Any]) -> None:
        self.app = app
        # Avoid self-observing the observability endpoints.
        self._excluded_metric_paths = {"/metrics", "/health"}

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        # Honour a caller-supplied id so logs line up across hops.
        request_id = Headers(scope=scope).get("x-request-id") or str(uuid.uuid4())
        path = scope.get("path")
        method = scope.get("method")

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=path,
            method=method,
        )

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers["X-Request-ID"] = request_id
                trace_id = _current_trace_id()
                if trace_id:
                    headers["X-Trace-ID"] = trace_id

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0

            # Update metrics first so they update even if logging misbehaves.
            if path not in self._excluded_metric_paths:
                get_metrics().observe_http_request(elapsed_ms=elapsed_ms)

            structlog.get_logger("access").info(
                "http_request",
                status_code=status_code,
                elapsed_ms=round(elapsed_ms, 2),
            )

            structlog.contextvars.clear_contextvars()
