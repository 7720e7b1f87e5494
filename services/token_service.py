"""
Bearer token signing and verification.

Tokens are HS256 JWTs carrying only ``{email, iat, exp}``. The signing key is
composite: the process-wide key for the token's purpose concatenated with the
per-user secret component stored on the user document. Nothing in the token
says which purpose it has; an auth token simply fails to verify under the
refresh pairing and vice versa.

Verification failures are reported as one generic AuthenticationError.
Callers never learn whether the signature, the expiry or the claims were at
fault.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

import jwt

from config import TokenSettings
from errors import AuthenticationError
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)

ALGORITHM = "HS256"
INVALID_TOKEN_CHALLENGE = 'Bearer error="invalid_token"'
_REQUIRED_CLAIMS = ["email", "iat", "exp"]


class TokenPurpose(str, Enum):
    AUTH = "auth"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    email: str
    iat: int
    exp: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TokenClaims":
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise AuthenticationError(
                "invalid or expired token", challenge=INVALID_TOKEN_CHALLENGE
            )
        return cls(
            email=email,
            iat=_numeric_claim(payload, "iat"),
            exp=_numeric_claim(payload, "exp"),
        )


def _numeric_claim(payload: dict[str, Any], name: str) -> int:
    value = payload.get(name)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AuthenticationError(
            "invalid or expired token", challenge=INVALID_TOKEN_CHALLENGE
        )
    return int(value)


class TokenService:
    def __init__(self, settings: TokenSettings) -> None:
        self._process_keys = {
            TokenPurpose.AUTH: settings.jwt_auth_key,
            TokenPurpose.REFRESH: settings.jwt_refresh_key,
        }
        self._lifespans = {
            TokenPurpose.AUTH: timedelta(seconds=settings.auth_token_ttl_seconds),
            TokenPurpose.REFRESH: timedelta(seconds=settings.refresh_token_ttl_seconds),
        }

    def signing_key(self, purpose: TokenPurpose, secret_component: str) -> str:
        return self._process_keys[TokenPurpose(purpose)] + secret_component

    def lifespan(self, purpose: TokenPurpose) -> timedelta:
        return self._lifespans[TokenPurpose(purpose)]

    def mint(
        self,
        email: str,
        purpose: TokenPurpose,
        secret_component: str,
        lifespan: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        issued = now or utcnow()
        expires = issued + (lifespan if lifespan is not None else self.lifespan(purpose))
        claims = {
            "email": email,
            "iat": int(issued.timestamp()),
            "exp": int(expires.timestamp()),
        }
        return jwt.encode(
            claims, self.signing_key(purpose, secret_component), algorithm=ALGORITHM
        )

    def decode_unverified(self, token: str) -> TokenClaims:
        """Read the claims without checking the signature.

        Only good for finding out whose secret component to load; never act on
        the result before verify() has passed.
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != ALGORITHM:
                raise jwt.InvalidAlgorithmError(f"unexpected alg {header.get('alg')!r}")
            payload = jwt.decode(
                token,
                options={"verify_signature": False, "verify_exp": False},
                algorithms=[ALGORITHM],
            )
        except jwt.PyJWTError as e:
            log.info("token_decode_failed", reason=type(e).__name__)
            raise AuthenticationError(
                "invalid or expired token", challenge=INVALID_TOKEN_CHALLENGE
            )
        return TokenClaims.from_payload(payload)

    def verify(
        self, token: str, purpose: TokenPurpose, secret_component: str
    ) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self.signing_key(purpose, secret_component),
                algorithms=[ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.PyJWTError as e:
            log.info(
                "token_verification_failed",
                purpose=TokenPurpose(purpose).value,
                reason=type(e).__name__,
            )
            raise AuthenticationError(
                "invalid or expired token", challenge=INVALID_TOKEN_CHALLENGE
            )
        return TokenClaims.from_payload(payload)
