from urllib.parse import quote

from fastapi import HTTPException, Request, status

from application.dtos.errors import AppError
from infrastructure.config import Settings

_STATUS_BY_CATEGORY = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "size_limit_exceeded": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    "not_found": status.HTTP_404_NOT_FOUND,
    "replication_failed": status.HTTP_502_BAD_GATEWAY,
    "upstream": status.HTTP_502_BAD_GATEWAY,
    "identifier_space_exhausted": status.HTTP_503_SERVICE_UNAVAILABLE,
    "persistence": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _map_app_error_to_http_exception(error: AppError) -> HTTPException:
    """Map application layer errors to appropriate HTTP exceptions."""
    status_code = _STATUS_BY_CATEGORY.get(error.category)
    if status_code is None:
        # Unknown error category
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
    return HTTPException(status_code=status_code, detail=error.message)


def build_public_url_factory(request: Request, settings: Settings):  # noqa: ANN201
    """Return a callable turning a stored filename into its public URL."""
    base = settings.public_base_url or f"{request.url.scheme}://{request.url.netloc}"
    prefix = f"{base.rstrip('/')}/{settings.file_route_prefix.strip('/')}"

    def build(filename: str) -> str:
        return f"{prefix}/{filename}"

    return build


def content_disposition(original_name: str) -> str:
    """``inline`` disposition naming the original file, safe for non-ASCII names."""
    ascii_name = original_name.encode("ascii", "replace").decode("ascii")
    quoted_name = ascii_name.replace('"', "'")
    value = f'inline; filename="{quoted_name}"'
    if not original_name.isascii():
        value += f"; filename*=UTF-8''{quote(original_name)}"
    return value
