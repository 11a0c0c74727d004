"""
Uploads and removals against object storage with explicit failure policy.

- upload_required(): the file is part of the request's result (post and
  option images); failure raises ExternalServiceError.
- upload_all_required(): a batch of required uploads that is removed
  again when any file in it fails.
- upload_optional(): enrichment only (profile pictures); failure is logged
  and the caller continues without a URL.
- delete_quietly(): stored-file cleanup; failure is logged and swallowed.
"""

from __future__ import annotations

from typing import Iterable, Optional

from errors import ExternalServiceError
from infrastructure.storage.protocol import StorageProvider
from shared import messages
from shared.logging import get_logger
from shared.uploads import UploadedFile

log = get_logger(__name__)

PROFILE_FOLDER = "profile"
POST_FOLDER = "post"
OPTION_FOLDER = "post/options"


class MediaService:
    def __init__(self, storage: Optional[StorageProvider]) -> None:
        self._storage = storage

    @property
    def configured(self) -> bool:
        return self._storage is not None

    async def upload_required(self, folder: str, file: UploadedFile) -> str:
        if self._storage is None:
            raise ExternalServiceError(messages.STORAGE_NOT_CONFIGURED)
        try:
            return await self._storage.upload(folder, file)
        except Exception as e:
            log.error(
                "file_upload_failed",
                folder=folder,
                field=file.field_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ExternalServiceError("Failed to upload file") from e

    async def upload_optional(self, folder: str, file: Optional[UploadedFile]) -> Optional[str]:
        if file is None:
            return None
        if self._storage is None:
            log.warning("file_upload_skipped", folder=folder, reason="storage_not_configured")
            return None
        try:
            return await self._storage.upload(folder, file)
        except Exception as e:
            log.warning(
                "file_upload_failed",
                folder=folder,
                field=file.field_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def delete_quietly(self, urls: Iterable[Optional[str]]) -> None:
        if self._storage is None:
            return
        for url in urls:
            if not url:
                continue
            try:
                await self._storage.delete(url)
            except Exception as e:
                log.warning(
                    "file_delete_failed",
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    async def upload_all_required(
        self, uploads: list[tuple[str, UploadedFile]]
    ) -> list[str]:
        """Upload every ``(folder, file)`` pair, returning URLs in order.

        When one upload fails, the files already stored by this call are
        removed before the error propagates.
        """
        urls: list[str] = []
        try:
            for folder, file in uploads:
                urls.append(await self.upload_required(folder, file))
        except ExternalServiceError:
            await self.delete_quietly(urls)
            raise
        return urls
