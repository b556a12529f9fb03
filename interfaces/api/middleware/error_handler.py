"""Decorator turning upload and retrieval use case outcomes into HTTP responses."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from fastapi import HTTPException, status
from returns.result import Failure, Success

from application.dtos.errors import AppError
from domain.exceptions import InfrastructureError
from interfaces.api.routes.helpers import _map_app_error_to_http_exception

logger = structlog.get_logger()

T_co = TypeVar("T_co")


def _log_failure(failure: AppError, http_error: HTTPException, endpoint: str) -> None:
    # Gateway-side outcomes (5xx) are errors; rejected client input is a warning
    log = logger.error if http_error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
    log(
        "use_case_failed",
        category=failure.category,
        status_code=http_error.status_code,
        error=failure.message,
        details=failure.details,
        endpoint=endpoint,
    )


def _unwrap_result(result: object, endpoint: str) -> Any:  # noqa: ANN401
    if isinstance(result, Success):
        return result.unwrap()

    if isinstance(result, Failure):
        failure = result.failure()
        http_error = _map_app_error_to_http_exception(failure)
        _log_failure(failure, http_error, endpoint)
        raise http_error

    logger.error("unexpected_result_type", result_type=type(result).__name__, endpoint=endpoint)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Unexpected result type",
    )


def handle_use_case_errors(
    func: Callable[..., Awaitable[T_co]],
) -> Callable[..., Awaitable[T_co]]:
    """Unwrap the ``Result`` an endpoint returns, or raise the matching ``HTTPException``.

    Exceptions escaping the endpoint become a 500: record store failures
    (``InfrastructureError``) as "Service temporarily unavailable", anything
    else as "Internal server error". ``HTTPException`` passes through.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T_co:  # noqa: ANN401
        endpoint = func.__name__
        try:
            result = await func(*args, **kwargs)
        except HTTPException:
            raise
        except InfrastructureError as exc:
            logger.exception("infrastructure_error", error=str(exc), endpoint=endpoint)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Service temporarily unavailable",
            ) from exc
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                error=str(exc),
                error_type=type(exc).__name__,
                endpoint=endpoint,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from exc

        return _unwrap_result(result, endpoint)

    return wrapper
