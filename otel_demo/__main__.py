from __future__ import annotations

import argparse
import os

import uvicorn

from otel_demo.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="OpenTelemetry logging demo service")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--log-level", default=settings.log_level, help="Root log level")
    args = parser.parse_args()

    # The app factory reads settings itself; route the flag through the environment.
    os.environ["LOG_LEVEL"] = args.log_level
    get_settings.cache_clear()

    uvicorn.run(
        "otel_demo.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        # uvicorn's default dictConfig would replace the handlers configure_logging installs.
        log_config=None,
    )


if __name__ == "__main__":
    main()
