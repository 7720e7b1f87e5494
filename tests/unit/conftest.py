"""
Unit test configuration.

Unit tests build settings objects from monkeypatched environment variables
only (MONGODB_URI, JWT_AUTH_KEY, ...), so a developer's local .env must never
leak in.
"""

import pytest


@pytest.fixture(autouse=True)
def ignore_dotenv(monkeypatch):
    """Make pydantic-settings see an empty .env in every unit test."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})
