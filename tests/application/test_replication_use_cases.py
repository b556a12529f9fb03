"""Tests for ReplicateBlobUseCase."""

from __future__ import annotations

import asyncio

import pytest
from returns.result import Failure, Success

from application.use_cases.replication_use_cases import ReplicateBlobUseCase
from domain.value_objects.provider import Provider
from tests.mocks import (
    CATBOX_URL,
    CLOUDSKY_URL,
    MockStorageProvider,
    catbox_down,
    catbox_ok,
    cloudsky_down,
    cloudsky_ok,
)


class TestReplicateBlobUseCase:
    @pytest.mark.asyncio
    async def test_both_succeed_cloudsky_primary(self) -> None:
        cloudsky, catbox = cloudsky_ok(), catbox_ok()
        use_case = ReplicateBlobUseCase(cloudsky, catbox)

        result = await use_case.execute(b"0123456789", "text/plain")

        assert isinstance(result, Success)
        replication = result.unwrap()
        assert replication.cloudsky_url == CLOUDSKY_URL
        assert replication.catbox_url == CATBOX_URL
        assert replication.primary_provider is Provider.CLOUDSKY
        assert cloudsky.calls == [(b"0123456789", "text/plain")]
        assert catbox.calls == [(b"0123456789", "text/plain")]

    @pytest.mark.asyncio
    async def test_cloudsky_failure_makes_catbox_primary(self) -> None:
        use_case = ReplicateBlobUseCase(cloudsky_down(), catbox_ok())

        result = await use_case.execute(b"data", None)

        assert isinstance(result, Success)
        replication = result.unwrap()
        assert replication.cloudsky_url is None
        assert replication.primary_provider is Provider.CATBOX

    @pytest.mark.asyncio
    async def test_catbox_failure_keeps_cloudsky_primary(self) -> None:
        catbox = catbox_down()
        use_case = ReplicateBlobUseCase(cloudsky_ok(), catbox)

        result = await use_case.execute(b"data", None)

        assert isinstance(result, Success)
        assert result.unwrap().primary_provider is Provider.CLOUDSKY
        assert result.unwrap().catbox_url is None
        assert len(catbox.calls) == 1

    @pytest.mark.asyncio
    async def test_both_fail_reports_both_reasons(self) -> None:
        use_case = ReplicateBlobUseCase(
            cloudsky_down("Failed to get presigned URL: quota"),
            catbox_down("Invalid response from Catbox: ''"),
        )

        result = await use_case.execute(b"data", None)

        assert isinstance(result, Failure)
        error = result.failure()
        assert error.category == "replication_failed"
        assert "quota" in error.message
        assert "Invalid response from Catbox" in error.message
        assert error.details == {
            "cloudsky": "Failed to get presigned URL: quota",
            "catbox": "Invalid response from Catbox: ''",
        }

    @pytest.mark.asyncio
    async def test_unexpected_exception_counts_as_failure(self) -> None:
        cloudsky = MockStorageProvider(Provider.CLOUDSKY, error=RuntimeError("bug"))
        use_case = ReplicateBlobUseCase(cloudsky, catbox_ok())

        result = await use_case.execute(b"data", None)

        assert isinstance(result, Success)
        assert result.unwrap().primary_provider is Provider.CATBOX

    @pytest.mark.asyncio
    async def test_uploads_run_concurrently(self) -> None:
        """Each fake waits for the other to start; a sequential call would hang."""
        cloudsky_started = asyncio.Event()
        catbox_started = asyncio.Event()
        cloudsky = MockStorageProvider(
            Provider.CLOUDSKY,
            url=CLOUDSKY_URL,
            started=cloudsky_started,
            wait_for=catbox_started,
        )
        catbox = MockStorageProvider(
            Provider.CATBOX,
            url=CATBOX_URL,
            started=catbox_started,
            wait_for=cloudsky_started,
        )
        use_case = ReplicateBlobUseCase(cloudsky, catbox)

        result = await asyncio.wait_for(use_case.execute(b"data", None), timeout=2)

        assert isinstance(result, Success)

    @pytest.mark.asyncio
    async def test_fast_failure_does_not_cut_slow_success_short(self) -> None:
        release = asyncio.Event()
        cloudsky = MockStorageProvider(Provider.CLOUDSKY, url=CLOUDSKY_URL, wait_for=release)
        catbox = catbox_down()
        use_case = ReplicateBlobUseCase(cloudsky, catbox)

        task = asyncio.create_task(use_case.execute(b"data", None))
        await asyncio.sleep(0.01)
        assert not task.done()
        release.set()
        result = await asyncio.wait_for(task, timeout=2)

        assert isinstance(result, Success)
        assert result.unwrap().cloudsky_url == CLOUDSKY_URL
