"""
Test configuration and fixtures.
Storage is replaced by an in-memory fake transport; nothing touches the network.
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"
os.environ["R2_ENDPOINT"] = "https://account123.r2.cloudflarestorage.com"
os.environ["R2_ACCESS_KEY_ID"] = "test-access-key"
os.environ["R2_SECRET_ACCESS_KEY"] = "test-secret-key"
os.environ["R2_BUCKET_NAME"] = "test-bucket"

import pytest
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from uploads_gateway.config import StorageConfig
from uploads_gateway.storage.gateway import UploadGateway


class FakeTransport:
    """Records every call instead of talking to a bucket."""

    def __init__(self, bucket: str = "test-bucket"):
        self._bucket = bucket
        self.uploads: list[tuple[str, bytes, str]] = []
        self.deleted: list[str] = []
        self.batch_deletes: list[list[str]] = []
        self.upload_error: Optional[Exception] = None
        self.fail_upload_for: Optional[str] = None
        self.delete_error: Optional[Exception] = None
        self.batch_errors: list[dict] = []

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def call_count(self) -> int:
        return len(self.uploads) + len(self.deleted) + len(self.batch_deletes)

    def upload_bytes(self, object_key: str, data: bytes, content_type: str) -> None:
        if self.upload_error is not None:
            raise self.upload_error
        if self.fail_upload_for and object_key.endswith(self.fail_upload_for):
            raise ConnectionError(f"connection reset while writing {object_key}")
        self.uploads.append((object_key, data, content_type))

    def delete_object(self, object_key: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(object_key)

    def delete_objects(self, object_keys: list[str]) -> list[dict]:
        if self.delete_error is not None:
            raise self.delete_error
        self.batch_deletes.append(list(object_keys))
        return list(self.batch_errors)


@pytest.fixture
def storage_config() -> StorageConfig:
    """Storage config with a custom public domain."""
    return StorageConfig(
        endpoint="https://account123.r2.cloudflarestorage.com",
        access_key_id="test-access-key",
        secret_access_key="test-secret-key",
        bucket_name="test-bucket",
        public_domain="https://assets.example.com",
    )


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def gateway(storage_config: StorageConfig, fake_transport: FakeTransport) -> UploadGateway:
    return UploadGateway(storage_config, client=fake_transport)


def get_test_app(gateway: UploadGateway) -> FastAPI:
    """Return the app with the gateway dependency pointed at the fake."""
    from uploads_gateway.main import app
    from uploads_gateway.api.dependencies import get_upload_gateway

    app.dependency_overrides[get_upload_gateway] = lambda: gateway
    app.state.upload_gateway = gateway

    return app


@pytest.fixture
async def client(gateway: UploadGateway) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = get_test_app(gateway)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()
    app.state.upload_gateway = None
