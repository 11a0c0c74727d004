"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    DatabaseSettings,
    FirebaseSettings,
    JWTSettings,
    OtpSettings,
    UploadSettings,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def with_mongo(monkeypatch):
    """Set the required MONGODB_URI so AppSettings can be instantiated."""
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/")
    return monkeypatch


# ---------------------------------------------------------------------------
# DatabaseSettings
# ---------------------------------------------------------------------------


class TestDatabaseSettings:
    def test_loads_mongodb_uri(self, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017/")
        assert DatabaseSettings().mongodb_uri == "mongodb://db:27017/"

    def test_default_db_name(self, with_mongo):
        with_mongo.delenv("DB_NAME", raising=False)
        assert DatabaseSettings().db_name == "wsid"

    def test_transactions_off_by_default(self, with_mongo):
        with_mongo.delenv("MONGODB_TRANSACTIONS", raising=False)
        assert DatabaseSettings().mongodb_transactions is False

    def test_transactions_enabled_from_env(self, with_mongo):
        with_mongo.setenv("MONGODB_TRANSACTIONS", "true")
        assert DatabaseSettings().mongodb_transactions is True

    def test_missing_mongodb_uri_raises(self, monkeypatch):
        monkeypatch.delenv("MONGODB_URI", raising=False)
        with pytest.raises(PydanticValidationError):
            DatabaseSettings()


# ---------------------------------------------------------------------------
# JWTSettings / OtpSettings
# ---------------------------------------------------------------------------


class TestJWTSettings:
    def test_defaults(self, monkeypatch):
        for var in ("JWT_ALGORITHM", "ACCESS_TOKEN_TTL_SECONDS", "REFRESH_TOKEN_TTL_SECONDS"):
            monkeypatch.delenv(var, raising=False)
        s = JWTSettings()
        assert s.jwt_algorithm == "HS256"
        assert s.access_token_ttl_seconds == 3600
        assert s.refresh_token_ttl_seconds == 7 * 24 * 3600

    def test_secrets_from_env(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "access")
        monkeypatch.setenv("JWT_REFRESH_SECRET", "refresh")
        s = JWTSettings()
        assert s.jwt_secret == "access"
        assert s.jwt_refresh_secret == "refresh"


class TestOtpSettings:
    def test_defaults(self, monkeypatch):
        for var in ("OTP_EXPIRATION_TIME", "MAX_ALLOWED_OTP_RESENDS", "MAX_OTP_ATTEMPTS"):
            monkeypatch.delenv(var, raising=False)
        s = OtpSettings()
        assert s.otp_expiration_time == 10
        assert s.max_allowed_otp_resends == 3
        assert s.max_otp_attempts == 5

    def test_override(self, monkeypatch):
        monkeypatch.setenv("OTP_EXPIRATION_TIME", "2")
        assert OtpSettings().otp_expiration_time == 2


# ---------------------------------------------------------------------------
# FirebaseSettings / UploadSettings
# ---------------------------------------------------------------------------


class TestFirebaseSettings:
    def test_not_configured_without_credentials(self, monkeypatch):
        monkeypatch.delenv("FIREBASE_CREDENTIALS_PATH", raising=False)
        assert FirebaseSettings().is_configured is False

    def test_configured_with_credentials(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_CREDENTIALS_PATH", "/secrets/firebase.json")
        monkeypatch.setenv("FIREBASE_STORAGE_BUCKET", "wsid.appspot.com")
        s = FirebaseSettings()
        assert s.is_configured is True
        assert s.firebase_storage_bucket == "wsid.appspot.com"


class TestUploadSettings:
    def test_defaults_allow_jpeg_and_png(self, monkeypatch):
        monkeypatch.delenv("ALLOWED_UPLOAD_TYPES", raising=False)
        monkeypatch.delenv("MAX_UPLOAD_BYTES", raising=False)
        s = UploadSettings()
        assert s.allowed_upload_types == ["image/jpeg", "image/png"]
        assert s.max_upload_bytes == 6 * 1024 * 1024


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


class TestAppSettings:
    def test_env_default_development(self, with_mongo):
        with_mongo.delenv("ENV", raising=False)
        s = AppSettings()
        assert s.env == "development"
        assert s.is_production is False

    def test_is_production(self, with_mongo):
        with_mongo.setenv("ENV", "production")
        assert AppSettings().is_production is True

    def test_api_prefix_default(self, with_mongo):
        with_mongo.delenv("API_PREFIX", raising=False)
        assert AppSettings().api_prefix == "/api"

    def test_trending_window(self, with_mongo):
        with_mongo.setenv("TRENDING_WINDOW_DAYS", "3")
        assert AppSettings().trending_window_days == 3

    def test_sub_configs_present(self, with_mongo):
        s = AppSettings()
        assert s.db.mongodb_uri == "mongodb://localhost:27017/"
        assert isinstance(s.jwt, JWTSettings)
        assert isinstance(s.otp, OtpSettings)

    def test_settings_are_frozen(self, with_mongo):
        s = AppSettings()
        with pytest.raises(PydanticValidationError):
            s.env = "production"
