"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.protocol import EmailProvider
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from repositories.user_repository import UserRepository
from repositories.verification_repository import VerificationRequestRepository
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.user_routes import router as user_router
from services.identity import BearerAuthenticator
from services.secret_service import SecretService
from services.session_service import SessionService
from services.token_service import TokenService
from services.user_service import UserService
from shared.logging import get_logger, setup_logging

log = get_logger(__name__)

USERS_COLLECTION = "users"
VERIFICATIONS_COLLECTION = "verification-requests"


async def init_services(
    app: FastAPI,
    db,
    settings: AppSettings,
    email_provider: EmailProvider,
) -> None:
    """Build repositories and services over ``db`` and store them on app.state."""
    users = UserRepository(db[USERS_COLLECTION])
    verifications = VerificationRequestRepository(
        db[VERIFICATIONS_COLLECTION],
        ttl_seconds=settings.verification.verification_code_ttl_seconds,
    )
    await users.ensure_indexes()
    await verifications.ensure_indexes()

    tokens = TokenService(settings.tokens)
    secrets = SecretService(users)

    app.state.settings = settings
    app.state.db = db
    app.state.email_provider = email_provider
    app.state.authenticator = BearerAuthenticator(users, tokens)
    app.state.session_service = SessionService(
        users, verifications, tokens, secrets, email_provider
    )
    app.state.user_service = UserService(users)


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(
        log_level=settings.logging.log_level,
        log_format=settings.logging.log_format,
        env=settings.env,
    )

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        http_client = HttpClient(
            timeout=settings.email.email_timeout_seconds,
            user_agent=settings.app_name,
        )
        email_provider = ZeptoMailProvider(
            settings.email,
            http_client,
            app_url=settings.app_url,
            app_name=settings.app_name,
            code_ttl_seconds=settings.verification.verification_code_ttl_seconds,
        )
        app.state.mongo_client = mongo_client
        await init_services(
            app, mongo_client[settings.db.db_name], settings, email_provider
        )
        log.info("app_started", env=settings.env, db_name=settings.db.db_name)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=None if settings.is_production else settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(user_router)

    return app
