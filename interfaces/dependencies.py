"""FastAPI dependency injection integration with Lagom."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from lagom import Container

from infrastructure.config import Settings
from infrastructure.di.container import create_container


@lru_cache
def get_container() -> Container:
    """Get the DI container instance.

    Cached to ensure singleton behavior across requests.
    """
    return create_container()


def get_settings(container: Annotated[Container, Depends(get_container)]) -> Settings:
    """Settings registered in the container, so tests can override both together."""
    return container[Settings]
