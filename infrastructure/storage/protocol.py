"""StorageProvider protocol: services depend on this, not on Firebase."""

from typing import Protocol

from shared.uploads import UploadedFile


class StorageProvider(Protocol):
    async def upload(self, folder: str, file: UploadedFile) -> str:
        """Store *file* under *folder* and return its public URL."""
        ...

    async def delete(self, url: str) -> None: ...
