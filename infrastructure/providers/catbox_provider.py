from __future__ import annotations

import httpx
import structlog

from domain.exceptions import ProviderError
from domain.services.file_types import GENERIC_EXTENSION, sniff_file_type
from domain.value_objects.provider import Provider

log = structlog.get_logger(__name__)


class CatboxProvider:
    """StorageProvider adapter for Catbox's single multipart POST.

    Catbox answers with the object URL as plain text and no useful status
    code, so success is judged from the body alone. The MIME hint is ignored;
    the upload's extension comes from sniffing the bytes.
    """

    provider = Provider.CATBOX

    def __init__(
        self,
        client: httpx.AsyncClient,
        upload_url: str = "https://catbox.moe/user/api.php",
        timeout: float = 120.0,
    ) -> None:
        self._client = client
        self._upload_url = upload_url
        self._timeout = timeout

    async def store(self, data: bytes, mime_hint: str | None = None) -> str:  # noqa: ARG002
        sniffed = sniff_file_type(data)
        extension = sniffed.extension if sniffed else GENERIC_EXTENSION
        log.debug("catbox.store", extension=extension, size_bytes=len(data))

        try:
            response = await self._client.post(
                self._upload_url,
                data={"reqtype": "fileupload"},
                files={"fileToUpload": (f"file.{extension}", data)},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise ProviderError(self.provider, f"{type(e).__name__}: {e!s}") from e

        url = response.text.strip()
        if not _is_http_url(url):
            raise ProviderError(self.provider, f"Invalid response from Catbox: {url[:200]!r}")
        return url


def _is_http_url(value: str) -> bool:
    if not value:
        return False
    try:
        parsed = httpx.URL(value)
    except httpx.InvalidURL:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)
