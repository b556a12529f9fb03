from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from domain.exceptions import ProviderError
from domain.value_objects.provider import Provider
from domain.value_objects.replication_result import ReplicationResult

if TYPE_CHECKING:
    from application.ports.storage_provider import StorageProvider

logger = structlog.get_logger()


class ReplicateBlobUseCase:
    """Write one blob to both storage backends at the same time.

    Both uploads are awaited to completion; neither outcome cancels or delays
    the collection of the other. Each backend gets exactly one attempt.
    """

    def __init__(self, cloudsky: StorageProvider, catbox: StorageProvider) -> None:
        self.cloudsky = cloudsky
        self.catbox = catbox

    async def execute(
        self,
        data: bytes,
        mime_hint: str | None = None,
    ) -> Result[ReplicationResult, AppError]:
        logger.info("replication_start", size_bytes=len(data), mime_hint=mime_hint)

        outcomes = await asyncio.gather(
            self.cloudsky.store(data, mime_hint),
            self.catbox.store(data, mime_hint),
            return_exceptions=True,
        )
        cloudsky_url = self._collect(Provider.CLOUDSKY, outcomes[0])
        catbox_url = self._collect(Provider.CATBOX, outcomes[1])

        if cloudsky_url is None and catbox_url is None:
            reasons = {
                Provider.CLOUDSKY.value: self._reason(outcomes[0]),
                Provider.CATBOX.value: self._reason(outcomes[1]),
            }
            logger.error("replication_failed", **reasons)
            return Failure(
                AppError(
                    "replication_failed",
                    "Both CloudSky and Catbox upload failed: "
                    f"cloudsky: {reasons['cloudsky']}; catbox: {reasons['catbox']}",
                    details=reasons,
                ),
            )

        result = ReplicationResult(cloudsky_url=cloudsky_url, catbox_url=catbox_url)
        if result.backup_provider:
            logger.info("replication_success_both", primary=result.primary_provider.value)
        else:
            logger.warning("replication_partial", primary=result.primary_provider.value)
        return Success(result)

    @staticmethod
    def _collect(provider: Provider, outcome: str | BaseException) -> str | None:
        if isinstance(outcome, str):
            logger.info("provider_upload_success", provider=provider.value)
            return outcome
        if isinstance(outcome, ProviderError):
            logger.warning("provider_upload_failed", provider=provider.value, reason=outcome.reason)
            return None
        if isinstance(outcome, Exception):
            logger.error(
                "provider_upload_crashed",
                provider=provider.value,
                error=str(outcome),
                error_type=type(outcome).__name__,
                exc_info=outcome,
            )
            return None
        raise outcome

    @staticmethod
    def _reason(outcome: str | BaseException) -> str:
        if isinstance(outcome, ProviderError):
            return outcome.reason
        return str(outcome) or type(outcome).__name__
