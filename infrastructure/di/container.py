from __future__ import annotations

from dataclasses import dataclass

import httpx
from lagom import Container
from motor.motor_asyncio import AsyncIOMotorClient

from application.ports.blob_fetcher import BlobFetcher
from application.ports.repositories.blob_record_repository import BlobRecordRepository
from application.sagas.blob_upload_saga import BlobUploadSaga
from application.use_cases.replication_use_cases import ReplicateBlobUseCase
from application.use_cases.retrieval_use_cases import FetchBlobUseCase
from infrastructure.config import Settings, settings
from infrastructure.fetchers.httpx_blob_fetcher import HttpxBlobFetcher
from infrastructure.providers.catbox_provider import CatboxProvider
from infrastructure.providers.cloudsky_provider import CloudSkyProvider
from infrastructure.repositories.mongo_blob_record_repository import MongoBlobRecordRepository


@dataclass(frozen=True)
class HttpClients:
    """Shared outbound clients; one for backend uploads, one for reads."""

    upload: httpx.AsyncClient
    fetch: httpx.AsyncClient

    async def aclose(self) -> None:
        await self.upload.aclose()
        await self.fetch.aclose()


def create_container(app_settings: Settings = settings) -> Container:
    container = Container()

    container[Settings] = app_settings

    # Outbound HTTP
    http_clients = HttpClients(
        upload=httpx.AsyncClient(timeout=app_settings.provider_timeout_seconds),
        fetch=httpx.AsyncClient(timeout=app_settings.fetch_timeout_seconds),
    )
    container[HttpClients] = http_clients

    # Storage backends
    container[CloudSkyProvider] = CloudSkyProvider(
        client=http_clients.upload,
        control_url=app_settings.cloudsky_control_url,
        read_url=app_settings.cloudsky_read_url,
        key_prefix=app_settings.cloudsky_key_prefix,
        timeout=app_settings.provider_timeout_seconds,
    )
    container[CatboxProvider] = CatboxProvider(
        client=http_clients.upload,
        upload_url=app_settings.catbox_upload_url,
        timeout=app_settings.provider_timeout_seconds,
    )
    container[BlobFetcher] = HttpxBlobFetcher(
        client=http_clients.fetch,
        timeout=app_settings.fetch_timeout_seconds,
    )

    # Record store (MongoDB)
    mongo_client = AsyncIOMotorClient(app_settings.mongo_uri, tz_aware=True)
    container[AsyncIOMotorClient] = mongo_client
    container[BlobRecordRepository] = MongoBlobRecordRepository(
        client=mongo_client,
        settings=app_settings,
    )

    # Use cases
    container[ReplicateBlobUseCase] = lambda c: ReplicateBlobUseCase(
        cloudsky=c[CloudSkyProvider],
        catbox=c[CatboxProvider],
    )
    container[FetchBlobUseCase] = lambda c: FetchBlobUseCase(
        blob_record_repository=c[BlobRecordRepository],
        blob_fetcher=c[BlobFetcher],
    )

    # Sagas
    container[BlobUploadSaga] = lambda c: BlobUploadSaga(
        replicate_blob_use_case=c[ReplicateBlobUseCase],
        blob_record_repository=c[BlobRecordRepository],
        max_upload_bytes=app_settings.max_upload_bytes,
        max_attempts=app_settings.identifier_max_attempts,
        identifier_length=app_settings.identifier_length,
        long_identifier_length=app_settings.identifier_long_length,
        long_identifier_from_attempt=app_settings.identifier_long_from_attempt,
    )

    return container
