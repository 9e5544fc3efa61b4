"""
Pytest configuration and shared fixtures for Image Compressor tests.
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from image_compressor.bootstrap import Components, build_components
from image_compressor.core.config import Settings
from image_compressor.main import create_app
from image_compressor.queue import MemoryDelayQueue
from tests.fakes import TEST_BUCKET, FakeBlobStore, FakeClock, make_image_bytes


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def queue(clock) -> MemoryDelayQueue:
    return MemoryDelayQueue(name="test-delete-queue", clock=clock)


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        MINIO_BUCKET=TEST_BUCKET,
        QUEUE_BACKEND="memory",
        DELETE_QUEUE_NAME="test-delete-queue",
    )


@pytest.fixture
def components(test_settings, blob_store, queue, clock) -> Components:
    return build_components(test_settings, blob_store=blob_store, queue=queue, clock=clock)


@pytest.fixture
def client(components) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory store and queue."""
    with TestClient(create_app(components)) as test_client:
        yield test_client


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG", "RGBA")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG", "RGB")
