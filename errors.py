"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses.

Mapping onto the service's failure classes:

    InvalidInput  -> ValidationError, VerificationKindMismatchError (400)
    Unauthorized  -> AuthenticationError (401)
    NotFound      -> NotFoundError (404)
    Conflict      -> ConflictError (409)
    Internal      -> EmailDeliveryError (502), anything else (500)
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details
        self.headers = headers

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class VerificationKindMismatchError(ValidationError):
    """A verification code was submitted to a flow other than the one that issued it."""

    error_code = "verification_kind_mismatch"

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"verification code was issued for {actual}, not {expected}",
            field="code",
            details={"expected": expected, "actual": actual},
        )


class AuthenticationError(AppError):
    status_code = 401
    error_code = "authentication_error"

    def __init__(
        self,
        message: str,
        *,
        challenge: str = "Bearer",
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(
            message,
            field=field,
            details=details,
            headers={"WWW-Authenticate": challenge},
        )


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class ConflictError(AppError):
    status_code = 409
    error_code = "conflict"


class EmailDeliveryError(AppError):
    status_code = 502
    error_code = "email_delivery_failed"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        loc = [str(part) for part in first.get("loc", ()) if part != "body"]
        payload = ValidationError(
            first.get("msg", "invalid request"),
            field=".".join(loc) or None,
        ).to_dict()
        return JSONResponse(status_code=400, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "An internal server error occurred.", "code": "internal_error"},
        )
