from __future__ import annotations

import asyncio
import io
from pathlib import PurePath
from typing import TYPE_CHECKING, BinaryIO
from uuid import uuid4

import structlog
from returns.result import Failure, Result, Success

from application.dtos.blob_dtos import UploadBlobResponse
from application.dtos.errors import AppError
from domain.aggregates.blob_record import BlobRecord
from domain.exceptions import (
    DuplicateFilenameError,
    InfrastructureError,
    SizeLimitExceededError,
    ValidationError,
)
from domain.services.identifier_generator import generate_identifier

if TYPE_CHECKING:
    from collections.abc import Callable

    from application.dtos.blob_dtos import UploadBlobRequest
    from application.ports.repositories.blob_record_repository import BlobRecordRepository
    from application.use_cases.replication_use_cases import ReplicateBlobUseCase

logger = structlog.get_logger()

DEFAULT_MAX_UPLOAD_BYTES = 200 * 1024 * 1024


class BlobUploadSaga:
    """Orchestrates size check → replication → record commit for one upload.

    The record is only written after at least one backend holds the bytes.
    Filenames are allocated optimistically: the store's unique index decides,
    and a collision simply triggers another attempt with a fresh identifier.
    Backend copies are not removed if the commit ultimately fails.
    """

    def __init__(  # noqa: PLR0913
        self,
        replicate_blob_use_case: ReplicateBlobUseCase,
        blob_record_repository: BlobRecordRepository,
        *,
        identifier_generator: Callable[[int], str] = generate_identifier,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        max_attempts: int = 10,
        identifier_length: int = 6,
        long_identifier_length: int = 8,
        long_identifier_from_attempt: int = 5,
    ) -> None:
        self.replicate_blob = replicate_blob_use_case
        self.blob_record_repository = blob_record_repository
        self.identifier_generator = identifier_generator
        self.max_upload_bytes = max_upload_bytes
        self.max_attempts = max_attempts
        self.identifier_length = identifier_length
        self.long_identifier_length = long_identifier_length
        self.long_identifier_from_attempt = long_identifier_from_attempt

    async def execute(
        self,
        stream: BinaryIO,
        upload_req: UploadBlobRequest,
        url_builder: Callable[[str], str],
    ) -> Result[UploadBlobResponse, AppError]:
        # Step 1: Enforce the size ceiling before any backend is contacted.
        # The spooled upload may be on disk, so it is read off the event loop.
        try:
            data = await asyncio.to_thread(self._read_bounded, stream)
        except SizeLimitExceededError as e:
            logger.warning(
                "upload_rejected_size_limit",
                filename=upload_req.filename,
                size_bytes=e.size_bytes,
                limit_bytes=e.limit_bytes,
            )
            return Failure(AppError("size_limit_exceeded", str(e)))

        if not data:
            return Failure(AppError("validation", "Uploaded file is empty"))

        # Step 2: Replicate to both backends
        replication_result = await self.replicate_blob.execute(data, upload_req.mime_type)
        if isinstance(replication_result, Failure):
            return replication_result
        replication = replication_result.unwrap()

        # Step 3: Allocate a unique filename and commit the record
        record_id = uuid4()
        extension = PurePath(upload_req.filename).suffix
        for attempt in range(1, self.max_attempts + 1):
            filename = f"{self.identifier_generator(self._length_for(attempt))}{extension}"
            try:
                record = BlobRecord.create(
                    record_id=record_id,
                    filename=filename,
                    original_name=upload_req.filename,
                    size=len(data),
                    mime_type=upload_req.mime_type,
                    replication=replication,
                    public_url=url_builder(filename),
                )
                await self.blob_record_repository.insert(record)
            except DuplicateFilenameError:
                logger.warning(
                    "filename_collision",
                    filename=filename,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                )
                continue
            except ValidationError as e:
                return Failure(AppError("validation", f"Validation error: {e!s}"))
            except InfrastructureError as e:
                logger.error("record_persist_failed", filename=filename, error=str(e))
                return Failure(AppError("persistence", f"Failed to save file record: {e!s}"))

            logger.info(
                "upload_committed",
                filename=record.filename,
                primary=record.primary_provider.value,
                attempts=attempt,
            )
            return Success(
                UploadBlobResponse(
                    url=record.public_url,
                    filename=record.filename,
                    original_name=record.original_name,
                    providers=replication.provider_status(),
                ),
            )

        logger.error(
            "identifier_space_exhausted",
            original_name=upload_req.filename,
            attempts=self.max_attempts,
        )
        return Failure(
            AppError(
                "identifier_space_exhausted",
                f"Failed to generate unique filename after {self.max_attempts} attempts",
            ),
        )

    def _length_for(self, attempt: int) -> int:
        if attempt >= self.long_identifier_from_attempt:
            return self.long_identifier_length
        return self.identifier_length

    def _read_bounded(self, stream: BinaryIO) -> bytes:
        """Read the whole stream, refusing anything over the size ceiling.

        Seekable streams are measured first so oversized uploads are rejected
        without being read into memory.
        """
        try:
            start = stream.tell()
            declared = stream.seek(0, io.SEEK_END) - start
            stream.seek(start)
        except (AttributeError, OSError, io.UnsupportedOperation):
            declared = None

        if declared is not None and declared > self.max_upload_bytes:
            raise SizeLimitExceededError(declared, self.max_upload_bytes)

        data = stream.read(self.max_upload_bytes + 1)
        if len(data) > self.max_upload_bytes:
            raise SizeLimitExceededError(len(data), self.max_upload_bytes)
        return data
