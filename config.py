"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
AppSettings is built once by create_app() and handed to components through
app.state / FastAPI dependencies; nothing else reads the environment.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    mongodb_uri: str
    db_name: str = "wsid"
    # Requires a replica set; standalone servers reject transactions
    mongodb_transactions: bool = False


class JWTSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    jwt_secret: str = ""
    jwt_refresh_secret: str = ""
    jwt_algorithm: str = "HS256"
    access_token_ttl_seconds: int = 3600
    refresh_token_ttl_seconds: int = 604800


class OtpSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Minutes
    otp_expiration_time: int = 10
    max_allowed_otp_resends: int = 3
    max_otp_attempts: int = 5


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    zepto_api_token: str = ""
    zepto_from_email: str = "noreply@wsid.com"
    zepto_from_name: str = "WSID"


class FirebaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    firebase_credentials_path: str = ""
    firebase_storage_bucket: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.firebase_credentials_path)


class UploadSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    max_upload_bytes: int = 6 * 1024 * 1024
    allowed_upload_types: list[str] = ["image/jpeg", "image/png"]


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    # Core
    env: str = "development"
    app_name: str = "WSID"
    api_prefix: str = "/api"

    cors_origins: list[str] = [
        "https://wsid.com",
        "http://localhost:9000",
        "http://localhost:9001",
    ]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    trending_window_days: int = 7

    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    otp: OtpSettings = Field(default_factory=OtpSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    @property
    def is_production(self) -> bool:
        return self.env == "production"
