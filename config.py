"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The two process-wide JWT keys are deliberately separate settings: an auth
token and a refresh token must never verify under the same key, even when
the per-user secret components happen to collide.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "mailgate"


class TokenSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Process-wide halves of the composite signing secrets
    jwt_auth_key: str = Field(min_length=16)
    jwt_refresh_key: str = Field(min_length=16)

    auth_token_ttl_seconds: int = Field(default=900, gt=0)
    refresh_token_ttl_seconds: int = Field(default=2592000, gt=0)

    @model_validator(mode="after")
    def _keys_must_differ(self) -> "TokenSettings":
        if self.jwt_auth_key == self.jwt_refresh_key:
            raise ValueError("JWT_AUTH_KEY and JWT_REFRESH_KEY must differ")
        return self


class VerificationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    verification_code_ttl_seconds: int = Field(default=300, gt=0)


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    zepto_api_token: str = ""
    zepto_from_email: str = "noreply@mailgate.dev"
    zepto_from_name: str = "mailgate"
    email_timeout_seconds: float = Field(default=5.0, gt=0)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_url: str = "https://mailgate.dev"
    app_name: str = "mailgate"

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    tokens: Optional[TokenSettings] = None
    verification: Optional[VerificationSettings] = None
    email: Optional[EmailSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.db is None:
            self.db = DatabaseSettings()
        if self.tokens is None:
            self.tokens = TokenSettings()
        if self.verification is None:
            self.verification = VerificationSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
