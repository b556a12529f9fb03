"""Shared test fixtures and configuration."""

from __future__ import annotations

from uuid import uuid4

import pytest

from domain.aggregates.blob_record import BlobRecord
from domain.value_objects.provider import Provider
from domain.value_objects.replication_result import ReplicationResult
from tests.mocks import CATBOX_URL, CLOUDSKY_URL


@pytest.fixture
def both_replicated() -> ReplicationResult:
    return ReplicationResult(cloudsky_url=CLOUDSKY_URL, catbox_url=CATBOX_URL)


@pytest.fixture
def sample_record(both_replicated: ReplicationResult) -> BlobRecord:
    """Create a sample BlobRecord held by both backends."""
    return BlobRecord.create(
        record_id=uuid4(),
        filename="abc123.txt",
        original_name="notes.txt",
        size=10,
        mime_type="text/plain",
        replication=both_replicated,
        public_url="http://testserver/f/abc123.txt",
    )


@pytest.fixture
def catbox_only_record() -> BlobRecord:
    return BlobRecord(
        filename="zz9900.png",
        original_name="photo.png",
        size=2048,
        mime_type=None,
        catbox_url=CATBOX_URL,
        primary_provider=Provider.CATBOX,
        public_url="http://testserver/f/zz9900.png",
    )
