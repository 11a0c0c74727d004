"""Unit tests for upload policies and newsletter subscriptions."""

import pytest

from errors import ConflictError, ExternalServiceError
from services.media_service import MediaService
from shared import messages
from tests.fakes import FakeStorage, image


# ---------------------------------------------------------------------------
# MediaService
# ---------------------------------------------------------------------------


class TestMediaService:
    async def test_required_upload_returns_url(self):
        storage = FakeStorage()
        url = await MediaService(storage).upload_required("post", image("a.jpg", content_type="image/jpeg"))
        assert url.endswith(".jpg")
        assert storage.uploaded == [("post", url)]

    async def test_required_upload_failure_raises(self):
        with pytest.raises(ExternalServiceError):
            await MediaService(FakeStorage(fail_uploads=True)).upload_required("post", image())

    async def test_required_upload_without_storage(self):
        media = MediaService(None)
        assert media.configured is False
        with pytest.raises(ExternalServiceError) as exc:
            await media.upload_required("post", image())
        assert exc.value.message == messages.STORAGE_NOT_CONFIGURED

    async def test_batch_upload_keeps_order(self):
        storage = FakeStorage()
        urls = await MediaService(storage).upload_all_required(
            [("post", image("a.png")), ("post/options", image("b.jpg", content_type="image/jpeg"))]
        )
        assert urls == [url for _, url in storage.uploaded]
        assert urls[1].endswith(".jpg")

    async def test_batch_upload_failure_removes_stored_files(self):
        storage = FakeStorage(fail_folders={"post/options"})
        with pytest.raises(ExternalServiceError):
            await MediaService(storage).upload_all_required(
                [("post", image()), ("post", image()), ("post/options", image())]
            )
        assert len(storage.uploaded) == 2
        assert storage.deleted == [url for _, url in storage.uploaded]

    @pytest.mark.parametrize(
        "storage, file",
        [
            (FakeStorage(fail_uploads=True), image()),
            (None, image()),
            (FakeStorage(), None),
        ],
        ids=["failure", "not_configured", "no_file"],
    )
    async def test_optional_upload_yields_none(self, storage, file):
        assert await MediaService(storage).upload_optional("profile", file) is None

    async def test_optional_upload(self):
        storage = FakeStorage()
        url = await MediaService(storage).upload_optional("profile", image())
        assert url == storage.uploaded[0][1]

    async def test_delete_skips_empty_urls(self):
        storage = FakeStorage()
        await MediaService(storage).delete_quietly([None, "", "https://x/a.png"])
        assert storage.deleted == ["https://x/a.png"]

    async def test_delete_failures_are_swallowed(self):
        await MediaService(FakeStorage(fail_deletes=True)).delete_quietly(["https://x/a.png"])

    async def test_delete_without_storage(self):
        await MediaService(None).delete_quietly(["https://x/a.png"])


# ---------------------------------------------------------------------------
# SubscriptionService
# ---------------------------------------------------------------------------


class TestSubscribe:
    async def test_stores_email(self, backend):
        await backend.subscription_service().subscribe("reader@example.com")
        assert [s.email for s in backend.subscriptions.all()] == ["reader@example.com"]
        assert backend.subscriptions.all()[0].created_at is not None

    async def test_duplicate(self, backend):
        service = backend.subscription_service()
        await service.subscribe("reader@example.com")
        with pytest.raises(ConflictError) as exc:
            await service.subscribe("reader@example.com")
        assert exc.value.field == "email"

    async def test_race_hits_unique_index(self, backend, mocker):
        service = backend.subscription_service()
        await service.subscribe("reader@example.com")
        mocker.patch.object(backend.subscriptions, "get_by_email", return_value=None)
        with pytest.raises(ConflictError):
            await service.subscribe("reader@example.com")
        assert len(backend.subscriptions.all()) == 1
