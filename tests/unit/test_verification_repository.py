"""Unit tests for VerificationRequestRepository against mongomock."""

from datetime import timedelta

import pytest

from errors import ConflictError
from schemas.models.verification import VerificationKind
from shared.crypto import hash_code
from shared.datetime_utils import utcnow

EMAIL = "ada@example.com"


def _raw(mongo_db):
    return mongo_db["verification-requests"].sync


class TestCreate:
    async def test_sets_five_minute_expiry(self, verification_repo):
        now = utcnow()
        request = await verification_repo.create(
            EMAIL, VerificationKind.SIGNUP, hash_code("123456"), now=now
        )
        assert request.id is not None
        assert request.kind == "signup"
        assert request.expires_at - request.created_at == timedelta(minutes=5)

    async def test_plain_code_never_stored(self, verification_repo, mongo_db):
        await verification_repo.create(EMAIL, VerificationKind.LOGIN, hash_code("123456"))
        stored = _raw(mongo_db).find_one({"email": EMAIL})
        assert "123456" not in str(stored)
        assert stored["code_hash"].startswith("$argon2id$")

    async def test_active_request_conflicts(self, verification_repo):
        await verification_repo.create(EMAIL, VerificationKind.SIGNUP, "h1")
        with pytest.raises(ConflictError) as exc:
            await verification_repo.create(EMAIL, VerificationKind.LOGIN, "h2")
        assert exc.value.field == "email"

    async def test_expired_leftover_is_replaced(self, verification_repo, mongo_db):
        start = utcnow() - timedelta(minutes=10)
        await verification_repo.create(EMAIL, VerificationKind.SIGNUP, "old", now=start)
        fresh = await verification_repo.create(EMAIL, VerificationKind.LOGIN, "new")
        assert fresh.kind == "login"
        assert _raw(mongo_db).count_documents({"email": EMAIL}) == 1

    async def test_different_emails_independent(self, verification_repo):
        await verification_repo.create(EMAIL, VerificationKind.SIGNUP, "h1")
        await verification_repo.create("bob@example.com", VerificationKind.SIGNUP, "h2")


class TestFindByEmail:
    async def test_returns_active_request(self, verification_repo):
        await verification_repo.create(EMAIL, VerificationKind.LOGIN, "h")
        found = await verification_repo.find_by_email(EMAIL)
        assert found is not None
        assert found.kind == "login"
        assert found.expires_at.tzinfo is not None

    async def test_missing_returns_none(self, verification_repo):
        assert await verification_repo.find_by_email(EMAIL) is None

    async def test_expired_is_absent_and_removed(self, verification_repo, mongo_db):
        now = utcnow()
        await verification_repo.create(EMAIL, VerificationKind.LOGIN, "h", now=now)
        later = now + timedelta(minutes=5, seconds=1)
        assert await verification_repo.find_by_email(EMAIL, now=later) is None
        assert _raw(mongo_db).count_documents({"email": EMAIL}) == 0

    async def test_just_before_expiry_still_active(self, verification_repo):
        now = utcnow()
        await verification_repo.create(EMAIL, VerificationKind.LOGIN, "h", now=now)
        almost = now + timedelta(minutes=4, seconds=59)
        assert await verification_repo.find_by_email(EMAIL, now=almost) is not None


class TestConsume:
    async def test_only_first_consumer_wins(self, verification_repo):
        request = await verification_repo.create(EMAIL, VerificationKind.LOGIN, "h")
        assert await verification_repo.consume(request) is True
        assert await verification_repo.consume(request) is False
        assert await verification_repo.find_by_email(EMAIL) is None

    async def test_delete_is_idempotent(self, verification_repo):
        await verification_repo.create(EMAIL, VerificationKind.LOGIN, "h")
        await verification_repo.delete(EMAIL)
        await verification_repo.delete(EMAIL)
        assert await verification_repo.find_by_email(EMAIL) is None


async def test_indexes(verification_repo, mongo_db):
    info = _raw(mongo_db).index_information()
    unique = [i for i in info.values() if i["key"] == [("email", 1)]]
    assert unique and unique[0].get("unique") is True
    ttl = [i for i in info.values() if i["key"] == [("expires_at", 1)]]
    assert ttl and ttl[0].get("expireAfterSeconds") == 0
