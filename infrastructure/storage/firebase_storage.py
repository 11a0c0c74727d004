"""Firebase Cloud Storage implementation of StorageProvider.

Objects are stored as ``{folder}/{epoch_millis}-{random}{ext}``, made public
and addressed by ``https://storage.googleapis.com/{bucket}/{path}``.
The google-cloud-storage client is blocking, so each call runs in a worker
thread.
"""

from __future__ import annotations

import asyncio
import secrets
import time
from typing import Optional
from urllib.parse import unquote, urlparse

import firebase_admin
from firebase_admin import storage

from shared.logging import get_logger
from shared.uploads import UploadedFile

log = get_logger(__name__)

_PUBLIC_HOST = "storage.googleapis.com"


class FirebaseStorageProvider:
    def __init__(self, app: firebase_admin.App, bucket_name: Optional[str] = None) -> None:
        self._bucket = storage.bucket(bucket_name, app=app)

    @property
    def bucket_name(self) -> str:
        return self._bucket.name

    def object_path(self, url: str) -> Optional[str]:
        """Return the object path of a public URL in this bucket, else None."""
        parsed = urlparse(url)
        if parsed.netloc != _PUBLIC_HOST:
            return None
        prefix = f"/{self._bucket.name}/"
        if not parsed.path.startswith(prefix):
            return None
        return unquote(parsed.path[len(prefix):]) or None

    def _upload_sync(self, path: str, file: UploadedFile) -> str:
        blob = self._bucket.blob(path)
        blob.upload_from_string(file.data, content_type=file.content_type)
        blob.make_public()
        return f"https://{_PUBLIC_HOST}/{self._bucket.name}/{path}"

    async def upload(self, folder: str, file: UploadedFile) -> str:
        path = f"{folder}/{int(time.time() * 1000)}-{secrets.token_hex(4)}{file.extension}"
        url = await asyncio.to_thread(self._upload_sync, path, file)
        log.info("file_uploaded", path=path, size=len(file.data))
        return url

    async def delete(self, url: str) -> None:
        path = self.object_path(url)
        if path is None:
            log.warning("file_delete_skipped", reason="foreign_url", url=url)
            return
        await asyncio.to_thread(self._bucket.blob(path).delete)
        log.info("file_deleted", path=path)
