"""Domain exceptions for business rule violations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.value_objects.provider import Provider


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class SizeLimitExceededError(ValidationError):
    """Raised when an upload is larger than the configured ceiling."""

    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Upload limit exceeded ({limit_bytes // (1024 * 1024)}MB max, got {size_bytes} bytes)",
        )


class ProviderError(DomainError):
    """Raised by a storage provider adapter when a single backend call fails."""

    def __init__(self, provider: Provider, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider.value} upload failed: {reason}")


class DuplicateFilenameError(DomainError):
    """Raised when the record store rejects a filename that is already taken."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(f"Filename already exists: {filename}")


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (DB, network, etc.)."""
