"""
Request DTOs for authentication endpoints.

StartVerificationRequest — POST /auth/signup, POST /auth/login
SignupVerifyRequest      — POST /auth/signup/verify
LoginVerifyRequest       — POST /auth/login/verify
CodeRequest              — POST /auth/delete-account/verify

Emails are accepted as plain strings; normalisation and grammar checks happen
in the service layer so a malformed address surfaces as the usual
validation_error envelope with ``field: "email"``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StartVerificationRequest(BaseModel):
    """Request body for POST /auth/signup and POST /auth/login."""

    model_config = ConfigDict(populate_by_name=True)

    email: str


class SignupVerifyRequest(BaseModel):
    """Request body for POST /auth/signup/verify.

    ``name`` becomes the new account's display name.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    code: str
    name: str


class LoginVerifyRequest(BaseModel):
    """Request body for POST /auth/login/verify."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    code: str


class CodeRequest(BaseModel):
    """Request body for POST /auth/delete-account/verify.

    ``code`` is the 6-digit code emailed by POST /auth/delete-account.
    """

    model_config = ConfigDict(populate_by_name=True)

    code: str
