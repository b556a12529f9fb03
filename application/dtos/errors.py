from typing import Any


class AppError:
    """Represents different categories of application errors."""

    def __init__(self, category: str, message: str, details: dict[str, Any] | None = None) -> None:
        # 'validation', 'size_limit_exceeded', 'replication_failed',
        # 'identifier_space_exhausted', 'persistence', 'not_found', 'upstream', 'internal_error'
        self.category = category
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AppError(category={self.category!r}, message={self.message!r})"
