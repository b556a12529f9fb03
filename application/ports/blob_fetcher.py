from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domain.value_objects.provider import Provider


class OpenedStream(Protocol):
    """A backend response whose body has not been read yet."""

    def iter_bytes(self) -> AsyncIterator[bytes]: ...
    async def aclose(self) -> None: ...


class BlobFetcher(Protocol):
    async def open(self, provider: Provider, url: str) -> OpenedStream:
        """Issue a single GET for ``url`` and return the unread body.

        Raises:
            ProviderError: On network errors or any non-success status. The
                response is closed before raising.

        """
        ...
