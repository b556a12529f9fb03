from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from returns.result import Failure, Result, Success

from application.dtos.blob_dtos import FetchedBlob
from application.dtos.errors import AppError
from domain.exceptions import InfrastructureError, ProviderError
from domain.services.file_types import GENERIC_MIME_TYPE

if TYPE_CHECKING:
    from application.ports.blob_fetcher import BlobFetcher
    from application.ports.repositories.blob_record_repository import BlobRecordRepository

logger = structlog.get_logger()


class FetchBlobUseCase:
    """Serve a blob from the first backend that answers with a success status.

    Backends are tried one at a time: primary first, then Catbox, then
    CloudSky. Nothing is cached; every read goes back to a backend.
    """

    def __init__(
        self,
        blob_record_repository: BlobRecordRepository,
        blob_fetcher: BlobFetcher,
    ) -> None:
        self.blob_record_repository = blob_record_repository
        self.blob_fetcher = blob_fetcher

    async def execute(self, filename: str) -> Result[FetchedBlob, AppError]:
        try:
            record = await self.blob_record_repository.get_by_filename(filename)
        except InfrastructureError as e:
            logger.error("record_lookup_failed", filename=filename, error=str(e))
            return Failure(AppError("persistence", f"Failed to look up file: {e!s}"))

        if record is None:
            return Failure(AppError("not_found", "File not found"))

        for position, (provider, url) in enumerate(record.read_candidates()):
            role = "primary" if position == 0 else "backup"
            logger.info("fetch_attempt", filename=filename, provider=provider.value, role=role)
            try:
                opened = await self.blob_fetcher.open(provider, url)
            except ProviderError as e:
                logger.warning(
                    "fetch_attempt_failed",
                    filename=filename,
                    provider=provider.value,
                    role=role,
                    reason=e.reason,
                )
                continue

            logger.info("fetch_success", filename=filename, provider=provider.value, role=role)
            return Success(
                FetchedBlob(
                    filename=record.filename,
                    original_name=record.original_name,
                    mime_type=record.mime_type or GENERIC_MIME_TYPE,
                    size=record.size,
                    served_by=provider,
                    chunks=opened.iter_bytes(),
                    aclose=opened.aclose,
                ),
            )

        logger.error("all_providers_failed", filename=filename)
        return Failure(
            AppError("upstream", "Error fetching file from storage - all providers failed"),
        )
