"""
Response DTOs for authentication endpoints.

VerificationSentResponse — POST /auth/signup, /auth/login, /auth/delete-account  (200)
SessionResponse          — POST /auth/signup/verify (201), /auth/login/verify (200)
RefreshResponse          — POST /auth/refresh  (200)
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from schemas.dto.responses.users import UserProfileResponse


class VerificationSentResponse(BaseModel):
    """A code was emailed; ``expires_in`` is the remaining lifetime in seconds."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    expires_in: int
    expires_at: datetime


class SessionResponse(BaseModel):
    """Token pair issued after a successful signup or login verification."""

    model_config = ConfigDict(populate_by_name=True)

    auth_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserProfileResponse


class RefreshResponse(BaseModel):
    """Response body for POST /auth/refresh (200)."""

    model_config = ConfigDict(populate_by_name=True)

    auth_token: str
    token_type: str = "bearer"
