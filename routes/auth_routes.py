"""
Authentication endpoints.

POST /auth/signup                 — email a signup code
POST /auth/signup/verify          — redeem it, create the account, issue tokens
POST /auth/login                  — email a login code
POST /auth/login/verify           — redeem it, issue tokens
POST /auth/refresh                — refresh token in, new auth token out
POST /auth/logout-everywhere      — rotate secrets, killing every issued token
POST /auth/delete-account         — email an account-deletion code
POST /auth/delete-account/verify  — redeem it and delete the account
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dependencies import get_auth_identity, get_refresh_identity, get_session_service
from schemas.dto.requests.auth import (
    CodeRequest,
    LoginVerifyRequest,
    SignupVerifyRequest,
    StartVerificationRequest,
)
from schemas.dto.responses.auth import (
    RefreshResponse,
    SessionResponse,
    VerificationSentResponse,
)
from schemas.dto.responses.common import ErrorResponse, MessageResponse
from schemas.dto.responses.users import UserProfileResponse
from services.identity import AuthIdentity
from services.session_service import PendingVerification, Session, SessionService
from shared.datetime_utils import utcnow

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)


def _sent(pending: PendingVerification) -> VerificationSentResponse:
    remaining = int((pending.expires_at - utcnow()).total_seconds())
    return VerificationSentResponse(
        success=True,
        message=f"verification code sent to {pending.email}",
        expires_in=max(remaining, 0),
        expires_at=pending.expires_at,
    )


def _session(session: Session) -> SessionResponse:
    return SessionResponse(
        auth_token=session.tokens.auth_token,
        refresh_token=session.tokens.refresh_token,
        user=UserProfileResponse.from_user(session.user),
    )


@router.post("/signup", response_model=VerificationSentResponse)
async def signup(
    body: StartVerificationRequest,
    sessions: SessionService = Depends(get_session_service),
) -> VerificationSentResponse:
    return _sent(await sessions.start_signup(body.email))


@router.post(
    "/signup/verify",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup_verify(
    body: SignupVerifyRequest,
    sessions: SessionService = Depends(get_session_service),
) -> SessionResponse:
    return _session(await sessions.verify_signup(body.email, body.code, body.name))


@router.post("/login", response_model=VerificationSentResponse)
async def login(
    body: StartVerificationRequest,
    sessions: SessionService = Depends(get_session_service),
) -> VerificationSentResponse:
    return _sent(await sessions.start_login(body.email))


@router.post("/login/verify", response_model=SessionResponse)
async def login_verify(
    body: LoginVerifyRequest,
    sessions: SessionService = Depends(get_session_service),
) -> SessionResponse:
    return _session(await sessions.verify_login(body.email, body.code))


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    identity: AuthIdentity = Depends(get_refresh_identity),
    sessions: SessionService = Depends(get_session_service),
) -> RefreshResponse:
    return RefreshResponse(auth_token=sessions.refresh(identity))


@router.post("/logout-everywhere", response_model=MessageResponse)
async def logout_everywhere(
    identity: AuthIdentity = Depends(get_auth_identity),
    sessions: SessionService = Depends(get_session_service),
) -> MessageResponse:
    await sessions.logout_everywhere(identity)
    return MessageResponse(success=True, message="all sessions have been signed out")


@router.post("/delete-account", response_model=VerificationSentResponse)
async def delete_account(
    identity: AuthIdentity = Depends(get_auth_identity),
    sessions: SessionService = Depends(get_session_service),
) -> VerificationSentResponse:
    return _sent(await sessions.start_delete_account(identity))


@router.post("/delete-account/verify", response_model=MessageResponse)
async def delete_account_verify(
    body: CodeRequest,
    identity: AuthIdentity = Depends(get_auth_identity),
    sessions: SessionService = Depends(get_session_service),
) -> MessageResponse:
    await sessions.verify_delete_account(identity, body.code)
    return MessageResponse(success=True, message="account deleted")
