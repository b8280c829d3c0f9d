"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The JWT secret falls back to an insecure development value when JWT_SECRET is
unset; create_app() logs a warning whenever that fallback is in use.

expose_reset_code is the explicit debug switch that lets forgot-password
return the raw reset code when no SMTP transport is configured. It defaults to
on outside production and off in production.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev_secret"


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongo_uri: str = Field(validation_alias=AliasChoices("MONGO_URI", "MONGODB_URI"))
    db_name: str = "wassl"


class JWTSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    jwt_issuer: str = "wassl"
    jwt_audience: str = "wassl.api"
    access_token_ttl_seconds: int = 7 * 24 * 3600

    # RS256 keys (optional)
    jwt_private_key: str = ""
    jwt_public_key: str = ""

    # HS256 secret (used when RS256 keys are absent)
    jwt_secret: str = DEFAULT_JWT_SECRET

    @property
    def use_rs256(self) -> bool:
        return bool(self.jwt_private_key and self.jwt_public_key)

    @property
    def uses_default_secret(self) -> bool:
        return not self.use_rs256 and self.jwt_secret == DEFAULT_JWT_SECRET


class SmtpSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    smtp_host: str = ""
    smtp_port: Optional[int] = None
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_from: str = ""
    smtp_timeout_seconds: float = 10.0

    @field_validator("smtp_port", mode="before")
    @classmethod
    def _blank_port_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_configured(self) -> bool:
        return bool(
            self.smtp_host and self.smtp_port and self.smtp_user and self.smtp_pass
        )

    @property
    def sender(self) -> str:
        return self.smtp_from or self.smtp_user


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "Wassl"
    host: str = "0.0.0.0"
    port: int = 5055

    # CORS: any origin, no credentials
    cors_origins: list[str] = ["*"]

    # Fixed header stamped on every response
    backend_header_name: str = "X-WASSL-BACKEND"
    backend_header_value: str = "1"

    # OpenAPI docs URL (None disables the docs UI)
    docs_url: Optional[str] = "/docs"

    # Return raw reset codes when SMTP is not configured (None = env default)
    expose_reset_code: Optional[bool] = None

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    jwt: Optional[JWTSettings] = None
    smtp: Optional[SmtpSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.expose_reset_code is None:
            self.expose_reset_code = not self.is_production

        if self.db is None:
            self.db = DatabaseSettings()
        if self.jwt is None:
            self.jwt = JWTSettings()
        if self.smtp is None:
            self.smtp = SmtpSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def backend_headers(self) -> dict[str, str]:
        return {self.backend_header_name: self.backend_header_value}
