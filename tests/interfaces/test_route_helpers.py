"""Tests for route helpers and the use case error decorator."""

from __future__ import annotations

import pytest
from fastapi import HTTPException, Request
from returns.result import Failure, Success

from application.dtos.errors import AppError
from domain.exceptions import InfrastructureError
from infrastructure.config import Settings
from interfaces.api.middleware import error_handler, handle_use_case_errors
from interfaces.api.routes.helpers import (
    _map_app_error_to_http_exception,
    build_public_url_factory,
    content_disposition,
)


def _request(host: str = "files.example.test", scheme: str = "https") -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "scheme": scheme,
            "server": (host, 443),
            "path": "/upload",
            "query_string": b"",
            "headers": [(b"host", host.encode())],
        },
    )


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("category", "status_code"),
        [
            ("validation", 400),
            ("size_limit_exceeded", 413),
            ("not_found", 404),
            ("replication_failed", 502),
            ("upstream", 502),
            ("identifier_space_exhausted", 503),
            ("persistence", 500),
        ],
    )
    def test_category_status(self, category: str, status_code: int) -> None:
        exc = _map_app_error_to_http_exception(AppError(category, "boom"))

        assert exc.status_code == status_code
        assert exc.detail == "boom"

    def test_unknown_category_hides_message(self) -> None:
        exc = _map_app_error_to_http_exception(AppError("mystery", "secret details"))

        assert exc.status_code == 500
        assert exc.detail == "Internal server error"


class TestPublicUrlFactory:
    def test_uses_request_host_when_unconfigured(self) -> None:
        build = build_public_url_factory(_request(), Settings(PUBLIC_BASE_URL=None))

        assert build("abc123.txt") == "https://files.example.test/f/abc123.txt"

    def test_configured_base_wins(self) -> None:
        settings = Settings(PUBLIC_BASE_URL="https://cdn.example.test/")

        build = build_public_url_factory(_request(), settings)

        assert build("abc123.txt") == "https://cdn.example.test/f/abc123.txt"


class TestContentDisposition:
    def test_ascii_name(self) -> None:
        assert content_disposition("notes.txt") == 'inline; filename="notes.txt"'

    def test_non_ascii_name_adds_encoded_form(self) -> None:
        value = content_disposition("résumé.pdf")

        assert value.startswith('inline; filename="r?sum?.pdf"')
        assert value.endswith("filename*=UTF-8''r%C3%A9sum%C3%A9.pdf")

    def test_quotes_are_neutralised(self) -> None:
        assert content_disposition('a"b.txt') == "inline; filename=\"a'b.txt\""

    def test_ascii_name_never_gets_encoded_form(self) -> None:
        assert "filename*" not in content_disposition('say "hi".txt')


class TestHandleUseCaseErrors:
    @pytest.mark.asyncio
    async def test_success_is_unwrapped(self) -> None:
        @handle_use_case_errors
        async def endpoint() -> object:
            return Success("ok")

        assert await endpoint() == "ok"

    @pytest.mark.asyncio
    async def test_failure_is_mapped(self) -> None:
        @handle_use_case_errors
        async def endpoint() -> object:
            return Failure(AppError("not_found", "File not found"))

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_infrastructure_error_is_service_unavailable_message(self) -> None:
        @handle_use_case_errors
        async def endpoint() -> object:
            raise InfrastructureError("db down")

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Service temporarily unavailable"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self) -> None:
        @handle_use_case_errors
        async def endpoint() -> object:
            raise RuntimeError("bug")

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.detail == "Internal server error"


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict]] = []

    def warning(self, event: str, **fields: object) -> None:
        self.events.append(("warning", event, fields))

    def error(self, event: str, **fields: object) -> None:
        self.events.append(("error", event, fields))

    def exception(self, event: str, **fields: object) -> None:
        self.events.append(("exception", event, fields))


class TestFailureLogging:
    @pytest.mark.asyncio
    async def test_client_rejection_logged_as_warning(self, monkeypatch) -> None:
        recorder = RecordingLogger()
        monkeypatch.setattr(error_handler, "logger", recorder)

        @handle_use_case_errors
        async def upload_file() -> object:
            return Failure(AppError("size_limit_exceeded", "Upload limit exceeded", {"size": 9}))

        with pytest.raises(HTTPException):
            await upload_file()

        level, event, fields = recorder.events[0]
        assert (level, event) == ("warning", "use_case_failed")
        assert fields["status_code"] == 413
        assert fields["details"] == {"size": 9}
        assert fields["endpoint"] == "upload_file"

    @pytest.mark.asyncio
    async def test_backend_outage_logged_as_error(self, monkeypatch) -> None:
        recorder = RecordingLogger()
        monkeypatch.setattr(error_handler, "logger", recorder)

        @handle_use_case_errors
        async def upload_file() -> object:
            return Failure(AppError("replication_failed", "Both CloudSky and Catbox upload failed"))

        with pytest.raises(HTTPException) as exc_info:
            await upload_file()

        assert exc_info.value.status_code == 502
        assert recorder.events[0][0] == "error"
        assert recorder.events[0][2]["category"] == "replication_failed"

    @pytest.mark.asyncio
    async def test_non_result_return_is_internal_error(self, monkeypatch) -> None:
        recorder = RecordingLogger()
        monkeypatch.setattr(error_handler, "logger", recorder)

        @handle_use_case_errors
        async def endpoint() -> object:
            return "not a result"

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.detail == "Unexpected result type"
        assert recorder.events == [
            ("error", "unexpected_result_type", {"result_type": "str", "endpoint": "endpoint"}),
        ]

    @pytest.mark.asyncio
    async def test_http_exception_passes_through(self) -> None:
        @handle_use_case_errors
        async def endpoint() -> object:
            raise HTTPException(status_code=418, detail="teapot")

        with pytest.raises(HTTPException) as exc_info:
            await endpoint()

        assert exc_info.value.status_code == 418
