from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import SimpleLogRecordProcessor
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import get_current_span

from otel_demo.config import get_settings
from otel_demo.main import create_app
from otel_demo.observability import bridge
from otel_demo.observability.logging import configure_logging
from otel_demo.observability.metrics import reset_metrics
from otel_demo.observability.telemetry import TelemetryProvider


class RecordingLogExporter:
    """Keeps every exported log record in memory."""

    def __init__(self) -> None:
        self.records: list[Any] = []
        self.shutdown_calls = 0

    def export(self, batch: Any) -> None:
        for item in batch:
            self.records.append(getattr(item, "log_record", item))

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True

    def shutdown(self) -> None:
        self.shutdown_calls += 1


class RecordingTelemetry:
    def __init__(self) -> None:
        self.spans = InMemorySpanExporter()
        self.logs = RecordingLogExporter()

        tracer_provider = TracerProvider()
        tracer_provider.add_span_processor(SimpleSpanProcessor(self.spans))
        logger_provider = LoggerProvider()
        logger_provider.add_log_record_processor(SimpleLogRecordProcessor(self.logs))
        self.provider = TelemetryProvider(tracer_provider=tracer_provider, logger_provider=logger_provider)

    def records(self, event: str | None = None) -> list[Any]:
        if event is None:
            return list(self.logs.records)
        return [r for r in self.logs.records if r.body == event]

    @staticmethod
    def trace_id_of(record: Any) -> int:
        # Newer SDKs carry the span context on ``context`` instead of ``trace_id``.
        context = getattr(record, "context", None)
        if context is not None:
            return get_current_span(context).get_span_context().trace_id
        return record.trace_id


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROCESS_DELAY_MS", "0")
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_CONSOLE_EXPORT", raising=False)
    get_settings.cache_clear()
    reset_metrics()
    configure_logging()

    yield

    bridge.uninstall()
    get_settings.cache_clear()


@pytest.fixture
def telemetry() -> RecordingTelemetry:
    return RecordingTelemetry()


@pytest.fixture
def app(telemetry: RecordingTelemetry) -> FastAPI:
    return create_app(telemetry=telemetry.provider)


@pytest.fixture
async def api_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
