"""Unit tests for the infrastructure layer (HTTP, email, Firebase storage and identity)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from config import EmailSettings, FirebaseSettings
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.firebase import init_firebase_app
from infrastructure.http_client import HttpClient
from infrastructure.identity.firebase_identity import FirebaseIdentityProvider
from infrastructure.storage.firebase_storage import FirebaseStorageProvider
from shared.uploads import UploadedFile


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_post_delegates_to_httpx(self, mocker):
        client = HttpClient()
        fake_resp = MagicMock(status_code=200)
        mocker.patch.object(client._client, "post", AsyncMock(return_value=fake_resp))
        resp = await client.post("http://example.com", json={"a": 1})
        assert resp.status_code == 200
        client._client.post.assert_awaited_once_with("http://example.com", json={"a": 1})
        await client.aclose()

    async def test_post_propagates_exception(self, mocker):
        client = HttpClient()
        mocker.patch.object(client._client, "post", AsyncMock(side_effect=RuntimeError("down")))
        with pytest.raises(RuntimeError):
            await client.post("http://example.com")
        await client.aclose()

    async def test_context_manager_closes(self, mocker):
        async with HttpClient() as client:
            close = mocker.patch.object(client._client, "aclose", AsyncMock())
        close.assert_awaited_once()


# ── ZeptoMailProvider ─────────────────────────────────────────────────────────


class TestZeptoMailProvider:
    def _make(self, token="test-token"):
        settings = EmailSettings(
            zepto_api_token=token,
            zepto_from_email="noreply@wsid.com",
            zepto_from_name="WSID",
        )
        http = MagicMock()
        provider = ZeptoMailProvider(settings=settings, http_client=http, app_name="WSID")
        return provider, http

    async def test_send_otp_makes_post(self):
        provider, http = self._make()
        http.post = AsyncMock(return_value=MagicMock(status_code=201))
        result = await provider.send_otp_email("user@example.com", "Alice", "123456", 10)
        assert result is True
        http.post.assert_awaited_once()
        _, kwargs = http.post.call_args
        payload = kwargs["json"]
        assert payload["to"][0]["email_address"]["address"] == "user@example.com"
        assert "123456" in payload["htmlbody"]
        assert "123456" in payload["textbody"]
        assert "10 minutes" in payload["textbody"]

    async def test_password_reset_uses_its_template(self):
        provider, http = self._make()
        http.post = AsyncMock(return_value=MagicMock(status_code=200))
        assert await provider.send_password_reset_email("u@e.com", None, "654321", 10)
        _, kwargs = http.post.call_args
        assert "password" in kwargs["json"]["subject"].lower()
        assert "654321" in kwargs["json"]["htmlbody"]
        assert kwargs["json"]["to"][0]["email_address"]["name"] == "u@e.com"

    async def test_returns_false_when_token_empty(self):
        provider, http = self._make(token="")
        http.post = AsyncMock()
        assert await provider.send_otp_email("u@e.com", None, "000000", 10) is False
        http.post.assert_not_awaited()

    async def test_returns_false_on_non_2xx(self):
        provider, http = self._make()
        http.post = AsyncMock(return_value=MagicMock(status_code=422, text="Unprocessable"))
        assert await provider.send_otp_email("u@e.com", None, "000000", 10) is False

    async def test_returns_false_on_exception(self):
        provider, http = self._make()
        http.post = AsyncMock(side_effect=Exception("timeout"))
        assert await provider.send_otp_email("u@e.com", None, "000000", 10) is False

    async def test_auth_header_prepends_prefix(self):
        provider, http = self._make(token="rawtoken")
        http.post = AsyncMock(return_value=MagicMock(status_code=200))
        await provider.send_otp_email("u@e.com", "Alice", "111111", 10)
        _, kwargs = http.post.call_args
        assert kwargs["headers"]["Authorization"] == "Zoho-enczapikey rawtoken"

    async def test_auth_header_not_double_prefixed(self):
        provider, http = self._make(token="Zoho-enczapikey alreadyprefixed")
        http.post = AsyncMock(return_value=MagicMock(status_code=201))
        await provider.send_password_reset_email("u@e.com", None, "654321", 10)
        _, kwargs = http.post.call_args
        assert kwargs["headers"]["Authorization"].count("Zoho-enczapikey") == 1


# ── Firebase app ──────────────────────────────────────────────────────────────


class TestInitFirebaseApp:
    def test_returns_none_when_not_configured(self):
        assert init_firebase_app(FirebaseSettings(firebase_credentials_path="")) is None

    def test_reuses_existing_app(self, mocker):
        existing = MagicMock()
        mocker.patch("infrastructure.firebase.firebase_admin.get_app", return_value=existing)
        settings = FirebaseSettings(firebase_credentials_path="/nope.json")
        assert init_firebase_app(settings) is existing

    def test_missing_credentials_file(self, mocker, tmp_path):
        mocker.patch("infrastructure.firebase.firebase_admin.get_app", side_effect=ValueError)
        settings = FirebaseSettings(firebase_credentials_path=str(tmp_path / "missing.json"))
        with pytest.raises(FileNotFoundError):
            init_firebase_app(settings)


# ── FirebaseStorageProvider ───────────────────────────────────────────────────


@pytest.fixture
def bucket(mocker):
    fake = MagicMock()
    fake.name = "wsid.appspot.com"
    mocker.patch(
        "infrastructure.storage.firebase_storage.storage.bucket", return_value=fake
    )
    return fake


class TestFirebaseStorageProvider:
    def test_object_path(self, bucket):
        provider = FirebaseStorageProvider(MagicMock())
        url = "https://storage.googleapis.com/wsid.appspot.com/post/1-ab.png"
        assert provider.object_path(url) == "post/1-ab.png"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/wsid.appspot.com/post/1.png",
            "https://storage.googleapis.com/other-bucket/post/1.png",
            "https://storage.googleapis.com/wsid.appspot.com/",
        ],
        ids=["foreign_host", "other_bucket", "no_path"],
    )
    def test_object_path_rejects(self, bucket, url):
        assert FirebaseStorageProvider(MagicMock()).object_path(url) is None

    async def test_upload_makes_public_and_returns_url(self, bucket):
        provider = FirebaseStorageProvider(MagicMock())
        file = UploadedFile("postImages", "cat.png", "image/png", b"data")
        url = await provider.upload("post", file)

        path = bucket.blob.call_args.args[0]
        assert path.startswith("post/") and path.endswith(".png")
        blob = bucket.blob.return_value
        blob.upload_from_string.assert_called_once_with(b"data", content_type="image/png")
        blob.make_public.assert_called_once()
        assert url == f"https://storage.googleapis.com/wsid.appspot.com/{path}"

    async def test_delete_own_object(self, bucket):
        provider = FirebaseStorageProvider(MagicMock())
        await provider.delete("https://storage.googleapis.com/wsid.appspot.com/profile/x.jpg")
        bucket.blob.assert_called_once_with("profile/x.jpg")
        bucket.blob.return_value.delete.assert_called_once()

    async def test_delete_skips_foreign_url(self, bucket):
        provider = FirebaseStorageProvider(MagicMock())
        await provider.delete("https://cdn.example.com/x.jpg")
        bucket.blob.assert_not_called()


# ── FirebaseIdentityProvider ──────────────────────────────────────────────────


class TestFirebaseIdentityProvider:
    async def test_verify_maps_claims(self, mocker):
        mocker.patch(
            "infrastructure.identity.firebase_identity.auth.verify_id_token",
            return_value={
                "uid": "fb-1",
                "email": "Alice@Example.com",
                "name": "Alice",
                "picture": "https://img/a.png",
                "firebase": {"sign_in_provider": "google.com"},
            },
        )
        identity = await FirebaseIdentityProvider(MagicMock()).verify_id_token("tok")
        assert identity.uid == "fb-1"
        assert identity.email == "alice@example.com"
        assert identity.provider == "google.com"

    async def test_invalid_token_is_none(self, mocker):
        mocker.patch(
            "infrastructure.identity.firebase_identity.auth.verify_id_token",
            side_effect=ValueError("malformed"),
        )
        assert await FirebaseIdentityProvider(MagicMock()).verify_id_token("bad") is None

    async def test_token_without_email_is_none(self, mocker):
        mocker.patch(
            "infrastructure.identity.firebase_identity.auth.verify_id_token",
            return_value={"uid": "fb-2"},
        )
        assert await FirebaseIdentityProvider(MagicMock()).verify_id_token("tok") is None

    async def test_delete_missing_user_is_quiet(self, mocker):
        from firebase_admin import auth

        mocker.patch(
            "infrastructure.identity.firebase_identity.auth.delete_user",
            side_effect=auth.UserNotFoundError("gone"),
        )
        await FirebaseIdentityProvider(MagicMock()).delete_user("fb-1")
