from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from lagom import Container
from returns.result import Failure
from starlette.background import BackgroundTask

from application.dtos.blob_dtos import FetchedBlob
from application.use_cases.retrieval_use_cases import FetchBlobUseCase
from infrastructure.config import Settings
from interfaces.api.routes.helpers import _map_app_error_to_http_exception, content_disposition
from interfaces.dependencies import get_container, get_settings

router = APIRouter(tags=["files"])


async def _forward(blob: FetchedBlob) -> AsyncIterator[bytes]:
    try:
        async for chunk in blob.chunks:
            yield chunk
    finally:
        await blob.aclose()


@router.get("/{filename}")
async def serve_file(
    filename: str,
    container: Annotated[Container, Depends(get_container)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> StreamingResponse:
    """Stream a stored file from the first backend that can serve it.

    Returns:
        200 OK: Bytes forwarded from a backend
        404 Not Found: No file with this identifier was ever recorded
        502 Bad Gateway: The file exists but no backend could serve it

    """
    use_case = container[FetchBlobUseCase]
    result = await use_case.execute(filename)
    if isinstance(result, Failure):
        raise _map_app_error_to_http_exception(result.failure())

    blob = result.unwrap()
    # Explicit Content-Type keeps Starlette from appending a charset to text types
    headers = {
        "Content-Type": blob.mime_type,
        "Content-Length": str(blob.size),
        "Content-Disposition": content_disposition(blob.original_name),
        "Cache-Control": f"public, max-age={settings.cache_max_age_seconds}",
        "Accept-Ranges": "bytes",
        "X-Served-By": blob.served_by.value,
    }
    # Closed by the background task even if iteration never starts
    return StreamingResponse(
        _forward(blob),
        headers=headers,
        background=BackgroundTask(blob.aclose),
    )
