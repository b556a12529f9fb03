from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, computed_field, model_validator

from domain.value_objects.provider import Provider

ProviderOutcome = Literal["success", "failed"]


class ProviderStatus(BaseModel):
    """Per-backend outcome summary returned to uploaders."""

    model_config = ConfigDict(frozen=True)

    cloudsky: ProviderOutcome
    catbox: ProviderOutcome
    primary: Provider


class ReplicationResult(BaseModel):
    """Value object describing where a blob landed after fan-out.

    CloudSky is primary whenever it holds a copy; Catbox is primary only when
    CloudSky failed.
    """

    model_config = ConfigDict(frozen=True)

    cloudsky_url: str | None = None
    catbox_url: str | None = None

    @model_validator(mode="after")
    def _at_least_one_url(self) -> ReplicationResult:
        if not self.cloudsky_url and not self.catbox_url:
            msg = "ReplicationResult requires at least one backend URL"
            raise ValueError(msg)
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def primary_provider(self) -> Provider:
        if self.cloudsky_url:
            return Provider.CLOUDSKY
        return Provider.CATBOX

    @property
    def backup_provider(self) -> Provider | None:
        if self.cloudsky_url and self.catbox_url:
            return Provider.CATBOX
        return None

    def url_for(self, provider: Provider) -> str | None:
        if provider is Provider.CLOUDSKY:
            return self.cloudsky_url
        return self.catbox_url

    def provider_status(self) -> ProviderStatus:
        return ProviderStatus(
            cloudsky="success" if self.cloudsky_url else "failed",
            catbox="success" if self.catbox_url else "failed",
            primary=self.primary_provider,
        )
