from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.provider import Provider
from domain.value_objects.replication_result import ProviderStatus


class UploadBlobRequest(BaseModel):
    filename: str = Field(..., description="Original filename of the upload")
    mime_type: str | None = Field(None, description="Declared MIME type of the upload")


class UploadBlobResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success"] = "success"
    url: str = Field(..., description="Public URL serving the blob")
    filename: str = Field(..., description="Short public identifier, including extension")
    original_name: str = Field(..., alias="originalName", description="Original filename")
    providers: ProviderStatus = Field(..., description="Outcome of each backend upload")


@dataclass(frozen=True)
class FetchedBlob:
    """Open byte stream for a blob plus the metadata needed to serve it.

    The stream is forwarded chunk by chunk; ``aclose`` must be awaited once the
    caller is done, whether or not the stream was fully consumed.
    """

    filename: str
    original_name: str
    mime_type: str
    size: int
    served_by: Provider
    chunks: AsyncIterator[bytes]
    aclose: Callable[[], Awaitable[None]]


class LegacyUploadResponse(BaseModel):
    """Response shape of the ``/cdn/api.php`` compatibility endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success"] = "success"
    url: str
    filename: str
    original_name: str = Field(..., alias="originalName")

    @classmethod
    def from_upload(cls, response: UploadBlobResponse) -> LegacyUploadResponse:
        return cls(url=response.url, filename=response.filename, original_name=response.original_name)
