"""
Response DTOs shared across routers.

ErrorResponse    — body of every non-2xx response (AppError.to_dict())
HealthResponse   — GET /health
MessageResponse  — {success, message} acknowledgement for actions with no payload
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error envelope; ``field`` names the offending input when there is one."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    code: str
    field: Optional[str] = None
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["healthy", "unhealthy"]
    checks: dict[str, Literal["ok", "error"]] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    """Logout-everywhere and account deletion acknowledgements."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: Optional[str] = None
