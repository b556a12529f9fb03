from .provider import Provider
from .replication_result import ProviderStatus, ReplicationResult

__all__ = [
    "Provider",
    "ProviderStatus",
    "ReplicationResult",
]
