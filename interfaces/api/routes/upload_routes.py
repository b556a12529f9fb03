from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from lagom import Container
from returns.result import Result

from application.dtos.blob_dtos import LegacyUploadResponse, UploadBlobRequest, UploadBlobResponse
from application.dtos.errors import AppError
from application.sagas.blob_upload_saga import BlobUploadSaga
from infrastructure.config import Settings
from interfaces.api.middleware import handle_use_case_errors
from interfaces.api.routes.helpers import build_public_url_factory
from interfaces.dependencies import get_container, get_settings

logger = structlog.get_logger()

router = APIRouter(tags=["uploads"])


async def _commit_upload(
    request: Request,
    container: Container,
    settings: Settings,
    file: UploadFile,
) -> Result[UploadBlobResponse, AppError]:
    # The spooled temp file behind UploadFile is closed on every path.
    try:
        logger.info(
            "upload_received",
            filename=file.filename,
            content_type=file.content_type,
            size_bytes=file.size,
        )
        saga = container[BlobUploadSaga]
        return await saga.execute(
            stream=file.file,
            upload_req=UploadBlobRequest(
                filename=file.filename or "file",
                mime_type=file.content_type,
            ),
            url_builder=build_public_url_factory(request, settings),
        )
    finally:
        await file.close()


@router.post("/upload", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def upload_file(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: Annotated[UploadFile, File()],
) -> UploadBlobResponse:
    """Replicate an uploaded file to both backends and return its public URL.

    Returns:
        200 OK: File stored on at least one backend and recorded
        413 Request Entity Too Large: File exceeds the upload ceiling
        502 Bad Gateway: Both backends rejected the upload
        503 Service Unavailable: No free identifier after all attempts

    """
    return await _commit_upload(request, container, settings, file)


@router.post("/cdn/api.php", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def upload_file_legacy(
    request: Request,
    container: Annotated[Container, Depends(get_container)],
    settings: Annotated[Settings, Depends(get_settings)],
    file: Annotated[UploadFile, File()],
) -> LegacyUploadResponse:
    """Compatibility endpoint for clients of the old PHP upload API."""
    result = await _commit_upload(request, container, settings, file)
    return result.map(LegacyUploadResponse.from_upload)
