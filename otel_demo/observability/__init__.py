"""Observability wiring for the demo service.

structlog on top of stdlib logging, an OpenTelemetry log bridge installed once per
process, request-id middleware, and an in-memory metrics snapshot for local use.
"""
