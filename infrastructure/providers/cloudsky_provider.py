from __future__ import annotations

import secrets
import time

import httpx
import structlog

from domain.exceptions import ProviderError
from domain.services.file_types import resolve_file_type
from domain.value_objects.provider import Provider

log = structlog.get_logger(__name__)

# The presigned PUT is signed with this header, so the upload must send it.
_SSE_HEADER = {"x-amz-server-side-encryption": "AES256"}


class CloudSkyProvider:
    """StorageProvider adapter for CloudSky's presigned-URL upload flow.

    Two requests per upload: the control endpoint hands out a write URL for a
    key we choose, then the bytes are PUT straight to that URL.
    """

    provider = Provider.CLOUDSKY

    def __init__(
        self,
        client: httpx.AsyncClient,
        control_url: str = "https://api.cloudsky.biz.id/get-upload-url",
        read_url: str = "https://api.cloudsky.biz.id/file",
        key_prefix: str = "cloudku",
        timeout: float = 120.0,
    ) -> None:
        self._client = client
        self._control_url = control_url
        self._read_url = read_url
        self._key_prefix = key_prefix
        self._timeout = timeout

    def build_key(self, extension: str) -> str:
        return f"{self._key_prefix}/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{extension}"

    async def store(self, data: bytes, mime_hint: str | None = None) -> str:
        file_type = resolve_file_type(mime_hint, data)
        file_key = self.build_key(file_type.extension)
        log.debug("cloudsky.store", file_key=file_key, content_type=file_type.mime_type)

        try:
            upload_url = await self._request_upload_url(file_key, file_type.mime_type, len(data))
            response = await self._client.put(
                upload_url,
                content=data,
                headers={"Content-Type": file_type.mime_type, **_SSE_HEADER},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise ProviderError(self.provider, f"{type(e).__name__}: {e!s}") from e

        if not response.is_success:
            raise ProviderError(self.provider, f"File upload failed: {response.text}")

        return f"{self._read_url}?key={file_key}"

    async def _request_upload_url(self, file_key: str, content_type: str, file_size: int) -> str:
        response = await self._client.post(
            self._control_url,
            json={"fileKey": file_key, "contentType": content_type, "fileSize": file_size},
            timeout=self._timeout,
        )
        if not response.is_success:
            raise ProviderError(self.provider, f"Failed to get presigned URL: {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(self.provider, "Invalid JSON from presign endpoint") from e
        upload_url = payload.get("uploadUrl") if isinstance(payload, dict) else None
        if not upload_url:
            raise ProviderError(self.provider, "No uploadUrl received from API")
        return upload_url
