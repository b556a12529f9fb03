"""Repository interfaces (ports) for the application layer."""

from abc import ABC, abstractmethod

from domain.aggregates.blob_record import BlobRecord


class BlobRecordRepository(ABC):
    """Interface for the blob record store.

    The store owns the uniqueness of ``filename``; it is the only concurrency
    control between racing uploads. Implementations raise domain exceptions:
    - DuplicateFilenameError: When the filename is already taken
    - InfrastructureError: When any other storage operation fails
    """

    @abstractmethod
    async def insert(self, record: BlobRecord) -> None:
        """Insert a record if no record with the same filename exists.

        The insert is refused while uniqueness cannot be enforced.

        Raises:
            DuplicateFilenameError: If the filename is already taken.
            InfrastructureError: If the insert fails for any other reason,
                including a uniqueness index that cannot be created.

        """

    @abstractmethod
    async def get_by_filename(self, filename: str) -> BlobRecord | None:
        """Return the record stored under ``filename``, or ``None``.

        Raises:
            InfrastructureError: If the lookup fails.

        """

    async def ensure_indexes(self) -> None:  # noqa: B027
        """Create whatever the store needs to enforce filename uniqueness.

        Safe to call repeatedly; ``insert`` calls it until it has succeeded once.
        """
