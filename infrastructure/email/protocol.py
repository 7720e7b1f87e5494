"""Outbound email contract. Implementations return False when delivery fails instead of raising."""

from typing import Protocol

from schemas.models.verification import VerificationKind


class EmailProvider(Protocol):
    async def send_verification_code(
        self, email: str, kind: VerificationKind, otp_code: str
    ) -> bool: ...
