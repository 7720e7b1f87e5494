"""
Shared test fixtures.

Repositories are exercised against mongomock wrapped in a thin async adapter,
so the same code paths that talk to pymongo's AsyncMongoClient in production
run unchanged under test.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import mongomock
import pytest

from config import TokenSettings
from repositories.user_repository import UserRepository
from repositories.verification_repository import VerificationRequestRepository
from schemas.models.verification import VerificationKind
from services.identity import BearerAuthenticator
from services.secret_service import SecretService
from services.session_service import SessionService
from services.token_service import TokenService
from services.user_service import UserService

AUTH_KEY = "auth-process-key-0123456789abcdef"
REFRESH_KEY = "refresh-process-key-0123456789abcdef"


class AsyncCollection:
    """Awaitable facade over a mongomock collection."""

    def __init__(self, collection) -> None:
        self.sync = collection

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self.sync, name)
        if not callable(attr):
            return attr

        async def call(*args, **kwargs):
            return attr(*args, **kwargs)

        return call


class AsyncDatabase:
    def __init__(self, db) -> None:
        self.sync = db

    def __getitem__(self, name: str) -> AsyncCollection:
        return AsyncCollection(self.sync[name])


@dataclass
class SentCode:
    email: str
    kind: str
    otp_code: str


@dataclass
class FakeEmailProvider:
    """Records every code it is asked to send; ``fail`` simulates a provider outage."""

    fail: bool = False
    sent: list[SentCode] = field(default_factory=list)

    async def send_verification_code(
        self, email: str, kind: VerificationKind, otp_code: str
    ) -> bool:
        if self.fail:
            return False
        self.sent.append(SentCode(email, VerificationKind(kind).value, otp_code))
        return True

    def last_code(self, email: str) -> str:
        for sent in reversed(self.sent):
            if sent.email == email:
                return sent.otp_code
        raise AssertionError(f"no code sent to {email}")


@pytest.fixture
def mongo_db():
    return AsyncDatabase(mongomock.MongoClient().db)


@pytest.fixture
def token_settings() -> TokenSettings:
    return TokenSettings(jwt_auth_key=AUTH_KEY, jwt_refresh_key=REFRESH_KEY)


@pytest.fixture
async def user_repo(mongo_db) -> UserRepository:
    repo = UserRepository(mongo_db["users"])
    await repo.ensure_indexes()
    return repo


@pytest.fixture
async def verification_repo(mongo_db) -> VerificationRequestRepository:
    repo = VerificationRequestRepository(mongo_db["verification-requests"], ttl_seconds=300)
    await repo.ensure_indexes()
    return repo


@pytest.fixture
def token_service(token_settings) -> TokenService:
    return TokenService(token_settings)


@pytest.fixture
def secret_service(user_repo) -> SecretService:
    return SecretService(user_repo)


@pytest.fixture
def email_provider() -> FakeEmailProvider:
    return FakeEmailProvider()


@pytest.fixture
def session_service(
    user_repo, verification_repo, token_service, secret_service, email_provider
) -> SessionService:
    return SessionService(
        user_repo, verification_repo, token_service, secret_service, email_provider
    )


@pytest.fixture
def authenticator(user_repo, token_service) -> BearerAuthenticator:
    return BearerAuthenticator(user_repo, token_service)


@pytest.fixture
def user_service(user_repo) -> UserService:
    return UserService(user_repo)
