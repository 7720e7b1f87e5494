"""
Repository for the `verification-requests` collection.

Expiry is enforced twice: a TTL index lets MongoDB garbage-collect stale
requests in the background (its sweeper runs roughly once a minute), and
every read treats a request past its expires_at as absent and deletes it.

The unique index on `email` is what arbitrates concurrent start requests;
the check-then-create performed by the session service is only a fast path.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from schemas.models.verification import VerificationKind, VerificationRequestDoc
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class VerificationRequestRepository:
    def __init__(self, collection, ttl_seconds: int = 300) -> None:
        self._col = collection
        self._ttl = timedelta(seconds=ttl_seconds)

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("email", ASCENDING)], unique=True)
        await self._col.create_index(
            [("expires_at", ASCENDING)], expireAfterSeconds=0
        )

    async def create(
        self,
        email: str,
        kind: VerificationKind,
        code_hash: str,
        now: Optional[datetime] = None,
    ) -> VerificationRequestDoc:
        """Persist a pending request for *email*.

        An expired leftover (not yet swept by the TTL monitor) is replaced; an
        active one makes this raise ConflictError.
        """
        now = now or utcnow()
        await self._col.delete_one({"email": email, "expires_at": {"$lte": now}})

        doc = VerificationRequestDoc(
            email=email,
            kind=kind,
            code_hash=code_hash,
            created_at=now,
            expires_at=now + self._ttl,
        )
        try:
            result = await self._col.insert_one(doc.to_mongo())
        except DuplicateKeyError:
            log.warning("verification_request_conflict", email=email, kind=doc.kind)
            raise ConflictError(
                "a verification code was already sent to this email",
                field="email",
            )
        doc.id = result.inserted_id
        log.info(
            "verification_request_created",
            email=email,
            kind=doc.kind,
            expires_at=doc.expires_at.isoformat(),
        )
        return doc

    async def find_by_email(
        self, email: str, now: Optional[datetime] = None
    ) -> Optional[VerificationRequestDoc]:
        raw = await self._col.find_one({"email": email})
        request = VerificationRequestDoc.from_mongo(raw)
        if request is None:
            return None
        if request.is_expired(now):
            await self._col.delete_one({"_id": request.id})
            log.info("verification_request_expired", email=email, kind=request.kind)
            return None
        return request

    async def consume(self, request: VerificationRequestDoc) -> bool:
        """Delete *request* by id; True only for the caller that removed it."""
        result = await self._col.delete_one({"_id": request.id})
        return result.deleted_count == 1

    async def delete(self, email: str) -> None:
        await self._col.delete_one({"email": email})
