"""
Bearer authentication.

BearerAuthenticator turns an ``Authorization`` header into an AuthIdentity:
decode the token unverified to learn the email, load that user's stored
secret component for the requested purpose, then verify signature and expiry
against it. The resulting identity is handed to route handlers and services
as an ordinary argument.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from errors import AuthenticationError
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from services.token_service import (
    INVALID_TOKEN_CHALLENGE,
    TokenClaims,
    TokenPurpose,
    TokenService,
)
from shared.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class AuthIdentity:
    """A caller whose bearer token verified under the user's current secret."""

    email: str
    purpose: TokenPurpose
    claims: TokenClaims
    user: UserDoc


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise AuthenticationError("missing bearer token")
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError(
            "malformed authorization header", challenge=INVALID_TOKEN_CHALLENGE
        )
    return token


class BearerAuthenticator:
    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    async def authenticate(
        self, authorization: Optional[str], purpose: TokenPurpose
    ) -> AuthIdentity:
        token = extract_bearer_token(authorization)
        unverified = self._tokens.decode_unverified(token)

        user = await self._users.find_by_email(unverified.email)
        if user is None:
            # Same answer as a bad signature: no account enumeration via tokens
            log.info("token_verification_failed", reason="unknown_user")
            raise AuthenticationError(
                "invalid or expired token", challenge=INVALID_TOKEN_CHALLENGE
            )

        component = (
            user.auth_secret_component
            if purpose == TokenPurpose.AUTH
            else user.refresh_secret_component
        )
        claims = self._tokens.verify(token, purpose, component)
        return AuthIdentity(email=user.email, purpose=purpose, claims=claims, user=user)
