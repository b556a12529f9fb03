from __future__ import annotations

from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from application.ports.repositories.blob_record_repository import BlobRecordRepository
from domain.aggregates.blob_record import BlobRecord
from domain.exceptions import DuplicateFilenameError, InfrastructureError
from infrastructure.config import Settings

logger = structlog.get_logger()


class MongoBlobRecordRepository(BlobRecordRepository):
    """Blob records in a MongoDB collection with a unique index on ``filename``.

    ``_id`` is left to MongoDB, so the filename index is the only one an
    insert can collide on. No insert is attempted until that index exists.
    """

    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.files = self.db[settings.mongo_files_collection]
        self._filename_index_ready = False

    async def ensure_indexes(self) -> None:
        try:
            await self.files.create_index(
                [("filename", ASCENDING)],
                unique=True,
                name="filename_unique",
            )
        except PyMongoError as e:
            msg = f"Failed to create filename index: {e!s}"
            raise InfrastructureError(msg) from e
        self._filename_index_ready = True
        logger.info("record_store_initialized", collection=self.files.name)

    async def insert(self, record: BlobRecord) -> None:
        if not self._filename_index_ready:
            await self.ensure_indexes()
        try:
            await self.files.insert_one(self._to_document(record))
        except DuplicateKeyError as e:
            key_pattern = (e.details or {}).get("keyPattern")
            if key_pattern is not None and "filename" not in key_pattern:
                msg = f"Unexpected duplicate key: {key_pattern}"
                raise InfrastructureError(msg) from e
            raise DuplicateFilenameError(record.filename) from e
        except PyMongoError as e:
            msg = f"Failed to insert file record: {e!s}"
            raise InfrastructureError(msg) from e

    async def get_by_filename(self, filename: str) -> BlobRecord | None:
        try:
            doc = await self.files.find_one({"filename": filename})
        except PyMongoError as e:
            msg = f"Failed to read file record: {e!s}"
            raise InfrastructureError(msg) from e
        if not doc:
            return None
        return self._from_document(doc)

    @staticmethod
    def _to_document(record: BlobRecord) -> dict[str, Any]:
        doc = record.model_dump()
        doc["record_id"] = str(doc.pop("id"))
        doc["primary_provider"] = record.primary_provider.value
        return doc

    @staticmethod
    def _from_document(doc: dict[str, Any]) -> BlobRecord:
        doc.pop("_id", None)
        doc["id"] = doc.pop("record_id")
        return BlobRecord(**doc)
