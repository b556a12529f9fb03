"""Domain layer exports."""

from domain.aggregates.blob_record import BlobRecord
from domain.exceptions import (
    DomainError,
    DuplicateFilenameError,
    ProviderError,
    SizeLimitExceededError,
    ValidationError,
)
from domain.value_objects import Provider, ProviderStatus, ReplicationResult

__all__ = [
    "BlobRecord",
    "DomainError",
    "DuplicateFilenameError",
    "Provider",
    "ProviderError",
    "ProviderStatus",
    "ReplicationResult",
    "SizeLimitExceededError",
    "ValidationError",
]
