from __future__ import annotations

from fastapi import Request

from otel_demo.config import Settings


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with (see ``create_app``)."""

    return request.app.state.settings
