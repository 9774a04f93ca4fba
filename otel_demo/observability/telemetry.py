"""OpenTelemetry provider construction.

The providers built here are never registered as the OpenTelemetry globals; callers
pass the :class:`TelemetryProvider` explicitly to whatever needs it (the log bridge,
the FastAPI instrumentation).
"""

from __future__ import annotations

from dataclasses import dataclass

from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, ConsoleLogExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from otel_demo import __version__
from otel_demo.config import Settings


@dataclass
class TelemetryProvider:
    tracer_provider: TracerProvider
    logger_provider: LoggerProvider

    def force_flush(self) -> None:
        self.tracer_provider.force_flush()
        self.logger_provider.force_flush()

    def shutdown(self) -> None:
        self.tracer_provider.shutdown()
        self.logger_provider.shutdown()


def create_resource(service_name: str) -> Resource:
    return Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: __version__})


def build_telemetry(settings: Settings) -> TelemetryProvider:
    """Build tracer + logger providers with the exporters enabled in settings.

    OTLP/gRPC export is on when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set, console export when
    ``OTEL_CONSOLE_EXPORT`` is true. With neither, spans and log records are created (so
    correlation ids exist) but go nowhere.
    """

    resource = create_resource(settings.service_name)
    tracer_provider = TracerProvider(resource=resource)
    logger_provider = LoggerProvider(resource=resource)

    if settings.otlp_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True))
        )
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(OTLPLogExporter(endpoint=settings.otlp_endpoint, insecure=True))
        )

    if settings.otel_console_export:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger_provider.add_log_record_processor(BatchLogRecordProcessor(ConsoleLogExporter()))

    return TelemetryProvider(tracer_provider=tracer_provider, logger_provider=logger_provider)
