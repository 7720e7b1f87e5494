"""
Session protocol orchestration.

Every flow that needs proof of email ownership goes through the same two
steps: *start* persists a hashed one-time code and emails the plaintext, and
*verify* redeems it. Per email the state machine is

    NoRequest -> PendingVerification(kind) -> Resolved | Expired

and a request can only be redeemed by the flow that created it.

Ordering rules enforced here:
- the pending request is persisted before the email goes out; if delivery
  fails the request is removed again and EmailDeliveryError is raised;
- a wrong code or wrong kind never consumes the pending request;
- consume() is the arbitration point between concurrent verifiers, so a code
  is redeemed at most once.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from errors import (
    ConflictError,
    EmailDeliveryError,
    NotFoundError,
    ValidationError,
    VerificationKindMismatchError,
)
from infrastructure.email.protocol import EmailProvider
from repositories.user_repository import UserRepository
from repositories.verification_repository import VerificationRequestRepository
from schemas.models.user import UserDoc
from schemas.models.verification import VerificationKind, VerificationRequestDoc
from services.identity import AuthIdentity
from services.secret_service import SecretService
from services.token_service import TokenPurpose, TokenService
from shared.crypto import hash_code, verify_code
from shared.generators import generate_verification_code
from shared.logging import get_logger
from shared.validators import normalize_email, validate_code_format, validate_name

log = get_logger(__name__)


@dataclass(frozen=True)
class PendingVerification:
    email: str
    kind: VerificationKind
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    auth_token: str
    refresh_token: str


@dataclass(frozen=True)
class Session:
    user: UserDoc
    tokens: TokenPair


class SessionService:
    def __init__(
        self,
        users: UserRepository,
        verifications: VerificationRequestRepository,
        tokens: TokenService,
        secrets: SecretService,
        email_provider: EmailProvider,
    ) -> None:
        self._users = users
        self._verifications = verifications
        self._tokens = tokens
        self._secrets = secrets
        self._email = email_provider

    # ── Signup ───────────────────────────────────────────────────────────────

    async def start_signup(self, email: str) -> PendingVerification:
        email = normalize_email(email)
        if await self._users.find_by_email(email) is not None:
            log.warning("signup_start_failed", reason="email_taken", email=email)
            raise ConflictError("email already registered", field="email")
        await self._ensure_no_pending(email)
        return await self._issue_code(email, VerificationKind.SIGNUP)

    async def verify_signup(self, email: str, code: str, name: str) -> Session:
        email = normalize_email(email)
        name = validate_name(name)
        await self._redeem(email, VerificationKind.SIGNUP, code)

        components = self._secrets.new_components()
        user = await self._users.create(
            email, name, components.auth, components.refresh
        )
        log.info("signup_verified", email=email)
        return Session(user=user, tokens=self._mint_pair(user))

    # ── Login ────────────────────────────────────────────────────────────────

    async def start_login(self, email: str) -> PendingVerification:
        email = normalize_email(email)
        if await self._users.find_by_email(email) is None:
            log.warning("login_start_failed", reason="unknown_user", email=email)
            raise NotFoundError("no account exists for this email", field="email")
        await self._ensure_no_pending(email)
        return await self._issue_code(email, VerificationKind.LOGIN)

    async def verify_login(self, email: str, code: str) -> Session:
        email = normalize_email(email)
        await self._redeem(email, VerificationKind.LOGIN, code)

        user = await self._users.touch_last_login(email)
        if user is None:
            raise NotFoundError("no account exists for this email", field="email")
        log.info("login_verified", email=email)
        return Session(user=user, tokens=self._mint_pair(user))

    # ── Token lifecycle ──────────────────────────────────────────────────────

    def refresh(self, identity: AuthIdentity) -> str:
        """Mint a new auth token for a caller holding a verified refresh token."""
        log.info("token_refreshed", email=identity.email)
        return self._tokens.mint(
            identity.email, TokenPurpose.AUTH, identity.user.auth_secret_component
        )

    async def logout_everywhere(self, identity: AuthIdentity) -> None:
        await self._secrets.rotate_both(identity.email)
        log.info("logged_out_everywhere", email=identity.email)

    # ── Account deletion ─────────────────────────────────────────────────────

    async def start_delete_account(self, identity: AuthIdentity) -> PendingVerification:
        await self._ensure_no_pending(identity.email)
        return await self._issue_code(identity.email, VerificationKind.DELETE_ACCOUNT)

    async def verify_delete_account(self, identity: AuthIdentity, code: str) -> UserDoc:
        await self._redeem(identity.email, VerificationKind.DELETE_ACCOUNT, code)

        deleted = await self._users.delete(identity.email)
        if deleted is None:
            raise NotFoundError("user not found")
        log.info("account_deleted", email=identity.email)
        return deleted

    # ── Internals ────────────────────────────────────────────────────────────

    def _mint_pair(self, user: UserDoc) -> TokenPair:
        return TokenPair(
            auth_token=self._tokens.mint(
                user.email, TokenPurpose.AUTH, user.auth_secret_component
            ),
            refresh_token=self._tokens.mint(
                user.email, TokenPurpose.REFRESH, user.refresh_secret_component
            ),
        )

    async def _ensure_no_pending(self, email: str) -> None:
        if await self._verifications.find_by_email(email) is not None:
            raise ConflictError(
                "a verification code was already sent to this email",
                field="email",
            )

    async def _issue_code(
        self, email: str, kind: VerificationKind
    ) -> PendingVerification:
        code = generate_verification_code()
        request = await self._verifications.create(email, kind, hash_code(code))

        try:
            delivered = await self._email.send_verification_code(email, kind, code)
        except Exception as e:
            log.error(
                "verification_code_delivery_error",
                email=email,
                kind=kind.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            delivered = False

        if not delivered:
            # Leave nothing behind that would block a retry
            await self._verifications.consume(request)
            log.error("verification_code_delivery_failed", email=email, kind=kind.value)
            raise EmailDeliveryError("failed to send verification code")

        log.info("verification_code_sent", email=email, kind=kind.value)
        return PendingVerification(email=email, kind=kind, expires_at=request.expires_at)

    async def _redeem(
        self, email: str, kind: VerificationKind, code: str
    ) -> VerificationRequestDoc:
        code = validate_code_format(code)
        request = await self._verifications.find_by_email(email)
        if request is None:
            log.warning("verification_failed", reason="no_request", email=email, kind=kind.value)
            raise NotFoundError(
                "no pending verification for this email; request a new code",
                field="email",
            )
        if request.kind != kind.value:
            log.warning(
                "verification_failed",
                reason="kind_mismatch",
                email=email,
                expected=kind.value,
                actual=request.kind,
            )
            raise VerificationKindMismatchError(expected=kind.value, actual=request.kind)
        if not verify_code(code, request.code_hash):
            log.warning("verification_failed", reason="wrong_code", email=email, kind=kind.value)
            raise ValidationError("invalid verification code", field="code")
        if not await self._verifications.consume(request):
            # Another request redeemed the same code first
            raise NotFoundError(
                "no pending verification for this email; request a new code",
                field="email",
            )
        return request
