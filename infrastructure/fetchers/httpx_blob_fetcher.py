from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import structlog

from domain.exceptions import ProviderError
from domain.value_objects.provider import Provider

log = structlog.get_logger(__name__)

CHUNK_SIZE = 64 * 1024


class HttpxOpenedStream:
    def __init__(self, response: httpx.Response, chunk_size: int = CHUNK_SIZE) -> None:
        self._response = response
        self._chunk_size = chunk_size

    def iter_bytes(self) -> AsyncIterator[bytes]:
        return self._response.aiter_bytes(self._chunk_size)

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpxBlobFetcher:
    """BlobFetcher backed by a shared ``httpx.AsyncClient`` in streaming mode.

    Only the status line and headers are read here; the body is left on the
    wire for the caller to forward.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float = 60.0) -> None:
        self._client = client
        self._timeout = timeout

    async def open(self, provider: Provider, url: str) -> HttpxOpenedStream:
        try:
            request = self._client.build_request("GET", url, timeout=self._timeout)
            response = await self._client.send(request, stream=True, follow_redirects=True)
        except httpx.HTTPError as e:
            raise ProviderError(provider, f"{type(e).__name__}: {e!s}") from e

        if not response.is_success:
            await response.aclose()
            raise ProviderError(provider, f"HTTP {response.status_code} from {url}")

        log.debug("blob_fetcher.opened", provider=provider.value, status=response.status_code)
        return HttpxOpenedStream(response)
