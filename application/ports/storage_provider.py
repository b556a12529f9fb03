from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domain.value_objects.provider import Provider


class StorageProvider(Protocol):
    """Port for one third-party object-storage backend.

    Concrete adapters live in infrastructure/providers/ and hide each
    backend's upload protocol behind "push a blob, get back a durable URL".
    """

    provider: Provider

    async def store(self, data: bytes, mime_hint: str | None = None) -> str:
        """Upload ``data`` and return the URL it can be read back from.

        Args:
            data: Raw blob bytes
            mime_hint: Declared MIME type, if the uploader supplied one

        Returns:
            Absolute URL of the stored object

        Raises:
            ProviderError: If the backend rejects the upload or is unreachable

        """
        ...
