"""Demo HTTP service that bridges structlog/stdlib logging into OpenTelemetry."""

__version__ = "0.1.0"
