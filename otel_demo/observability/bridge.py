"""One-time installation of the OpenTelemetry logging bridge.

Once installed, every record reaching the root logger (stdlib or structlog) is also
emitted as an OpenTelemetry log record through the provider's ``LoggerProvider``.
Records emitted inside an active span carry that span's trace and span ids.
"""

from __future__ import annotations

import logging
from threading import Lock

import structlog
from opentelemetry.sdk._logs import LoggingHandler

from otel_demo.observability.telemetry import TelemetryProvider


class BridgeInstallError(RuntimeError):
    """Raised when the bridge cannot be installed."""


_lock = Lock()
_handler: LoggingHandler | None = None


def install(telemetry: TelemetryProvider | None) -> bool:
    """Attach the bridge to the root logger. Returns False if it was already installed."""

    global _handler
    if telemetry is None:
        raise BridgeInstallError("A telemetry provider is required to install the log bridge")

    log = structlog.get_logger(__name__)
    with _lock:
        if _handler is not None:
            installed = False
        else:
            _handler = LoggingHandler(level=logging.NOTSET, logger_provider=telemetry.logger_provider)
            logging.getLogger().addHandler(_handler)
            installed = True

    if installed:
        log.info("log_bridge_installed")
    else:
        log.warning("log_bridge_already_installed")
    return installed


def uninstall() -> None:
    """Detach and flush the bridge handler (no-op when not installed)."""

    global _handler
    with _lock:
        handler, _handler = _handler, None

    if handler is None:
        return
    logging.getLogger().removeHandler(handler)
    handler.flush()


def is_installed() -> bool:
    with _lock:
        return _handler is not None
