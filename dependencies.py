"""
FastAPI dependency providers.

Services are built once in the app lifespan and stored on app.state; these
providers hand them to route handlers via Depends(). The two identity
providers run bearer authentication and return an AuthIdentity value. Nothing
is stashed on the request for later steps to pick up.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from services.identity import AuthIdentity, BearerAuthenticator
from services.session_service import SessionService
from services.token_service import TokenPurpose
from services.user_service import UserService


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_authenticator(request: Request) -> BearerAuthenticator:
    return request.app.state.authenticator


async def get_auth_identity(
    authorization: Optional[str] = Header(default=None),
    authenticator: BearerAuthenticator = Depends(get_authenticator),
) -> AuthIdentity:
    """Caller presenting a valid auth token."""
    return await authenticator.authenticate(authorization, TokenPurpose.AUTH)


async def get_refresh_identity(
    authorization: Optional[str] = Header(default=None),
    authenticator: BearerAuthenticator = Depends(get_authenticator),
) -> AuthIdentity:
    """Caller presenting a valid refresh token."""
    return await authenticator.authenticate(authorization, TokenPurpose.REFRESH)
