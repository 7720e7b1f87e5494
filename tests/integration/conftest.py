"""
Integration fixtures: the real routers and services over mongomock, with the
email provider replaced by a recorder (``email_provider`` from the root
conftest).
"""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import init_services
from config import AppSettings, DatabaseSettings
from errors import register_error_handlers
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.user_routes import router as user_router


@pytest.fixture
def app_settings(token_settings) -> AppSettings:
    return AppSettings(
        db=DatabaseSettings(mongodb_uri="mongodb://localhost:27017/"),
        tokens=token_settings,
    )


@pytest.fixture
def client(app_settings, email_provider, mongo_db):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_services(app, mongo_db, app_settings, email_provider)
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(user_router)

    with TestClient(app) as c:
        yield c
