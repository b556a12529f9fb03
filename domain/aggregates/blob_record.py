from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.exceptions import ValidationError
from domain.value_objects.provider import Provider
from domain.value_objects.replication_result import ReplicationResult


class BlobRecord(BaseModel):
    """Persisted record of one uploaded blob.

    A record is written once, when an upload commits, and never mutated
    afterwards. It always points at one or two backend copies and names the
    provider that reads should try first.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    filename: str = Field(..., min_length=1)
    original_name: str
    size: int = Field(..., gt=0)
    mime_type: str | None = None
    upload_timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    cloudsky_url: str | None = None
    catbox_url: str | None = None
    primary_provider: Provider
    public_url: str

    @model_validator(mode="after")
    def _primary_must_have_url(self) -> BlobRecord:
        if not self.cloudsky_url and not self.catbox_url:
            msg = "BlobRecord requires at least one backend URL"
            raise ValueError(msg)
        if not self.url_for(self.primary_provider):
            msg = f"Primary provider {self.primary_provider.value} has no URL"
            raise ValueError(msg)
        return self

    @classmethod
    def create(
        cls,
        *,
        record_id: UUID,
        filename: str,
        original_name: str,
        size: int,
        mime_type: str | None,
        replication: ReplicationResult,
        public_url: str,
    ) -> BlobRecord:
        try:
            return cls(
                id=record_id,
                filename=filename,
                original_name=original_name,
                size=size,
                mime_type=mime_type,
                cloudsky_url=replication.cloudsky_url,
                catbox_url=replication.catbox_url,
                primary_provider=replication.primary_provider,
                public_url=public_url,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def url_for(self, provider: Provider) -> str | None:
        if provider is Provider.CLOUDSKY:
            return self.cloudsky_url
        return self.catbox_url

    @property
    def primary_url(self) -> str | None:
        return self.url_for(self.primary_provider)

    @property
    def backup_url(self) -> str | None:
        other = Provider.CATBOX if self.primary_provider is Provider.CLOUDSKY else Provider.CLOUDSKY
        return self.url_for(other)

    def read_candidates(self) -> tuple[tuple[Provider, str], ...]:
        """Backend URLs in the order reads should try them.

        Primary first, then Catbox, then CloudSky, skipping absent URLs and
        providers already listed.
        """
        order = (self.primary_provider, Provider.CATBOX, Provider.CLOUDSKY)
        candidates: list[tuple[Provider, str]] = []
        for provider in order:
            url = self.url_for(provider)
            if url and all(p is not provider for p, _ in candidates):
                candidates.append((provider, url))
        return tuple(candidates)
