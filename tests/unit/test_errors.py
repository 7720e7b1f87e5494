"""Unit tests for the AppError hierarchy and its exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    ValidationError,
    VerificationKindMismatchError,
    register_error_handlers,
)


class TestAppErrorSubclasses:
    @pytest.mark.parametrize(
        "cls, status, code",
        [
            (ValidationError, 400, "validation_error"),
            (AuthenticationError, 401, "authentication_error"),
            (NotFoundError, 404, "not_found"),
            (ConflictError, 409, "conflict"),
            (EmailDeliveryError, 502, "email_delivery_failed"),
        ],
    )
    def test_status_and_code(self, cls, status, code):
        e = cls("boom")
        assert e.status_code == status
        assert e.error_code == code
        assert e.message == "boom"
        assert isinstance(e, AppError)

    def test_kind_mismatch_is_a_validation_error(self):
        e = VerificationKindMismatchError(expected="login", actual="signup")
        assert isinstance(e, ValidationError)
        assert e.status_code == 400
        assert e.error_code == "verification_kind_mismatch"
        assert e.field == "code"
        assert e.details == {"expected": "login", "actual": "signup"}
        assert "signup" in e.message and "login" in e.message

    def test_authentication_error_sets_challenge(self):
        assert AuthenticationError("no").headers == {"WWW-Authenticate": "Bearer"}
        e = AuthenticationError("no", challenge='Bearer error="invalid_token"')
        assert e.headers == {"WWW-Authenticate": 'Bearer error="invalid_token"'}


class TestAppErrorToDict:
    def test_basic(self):
        e = NotFoundError("user not found")
        assert e.to_dict() == {"error": "user not found", "code": "not_found"}

    @pytest.mark.parametrize(
        "kwargs, key, value",
        [
            ({"field": "email"}, "field", "email"),
            ({"details": {"expected": "login"}}, "details", {"expected": "login"}),
        ],
        ids=["with_field", "with_details"],
    )
    def test_optional_key_present(self, kwargs, key, value):
        e = ValidationError("invalid", **kwargs)
        assert e.to_dict()[key] == value

    def test_no_optional_keys_when_absent(self):
        d = NotFoundError("missing").to_dict()
        assert "field" not in d
        assert "details" not in d


class _Body(BaseModel):
    email: str


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("email already registered", field="email")

    @app.get("/unauthorized")
    async def unauthorized():
        raise AuthenticationError("missing bearer token")

    @app.post("/body")
    async def body(payload: _Body):
        return {"ok": True}

    return app


class TestErrorHandlers:
    def test_app_error_rendered(self):
        with TestClient(_app()) as client:
            resp = client.get("/conflict")
        assert resp.status_code == 409
        assert resp.json() == {
            "error": "email already registered",
            "code": "conflict",
            "field": "email",
        }

    def test_authentication_error_carries_header(self):
        with TestClient(_app()) as client:
            resp = client.get("/unauthorized")
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_request_validation_becomes_400(self):
        with TestClient(_app()) as client:
            resp = client.post("/body", json={})
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert body["field"] == "email"
