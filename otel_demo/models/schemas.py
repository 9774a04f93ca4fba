from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Payment(BaseModel):
    """Schema-free payment payload: any JSON object is accepted as-is."""

    model_config = ConfigDict(extra="allow")

    def __str__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in (self.model_extra or {}).items())
        return f"Payment({fields})"


class HealthResponse(BaseModel):
    status: str = "ok"
