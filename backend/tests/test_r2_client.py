"""
Tests for the boto3-backed R2 client.
Uses botocore's Stubber so no request leaves the process.
"""
import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from uploads_gateway.config import StorageConfig
from uploads_gateway.storage.r2_client import DELETE_BATCH_SIZE, R2Client


@pytest.fixture
def r2_client(storage_config: StorageConfig) -> R2Client:
    return R2Client(storage_config)


class TestR2Client:
    """Tests for R2Client."""

    def test_bucket(self, r2_client: R2Client):
        assert r2_client.bucket == "test-bucket"

    def test_upload_bytes_sets_content_type(self, r2_client: R2Client):
        r2_client._client = MagicMock()

        r2_client.upload_bytes("projects/1_logo.png", b"png-bytes", "image/png")

        args, kwargs = r2_client._client.upload_fileobj.call_args
        fileobj, bucket, key = args
        assert fileobj.read() == b"png-bytes"
        assert bucket == "test-bucket"
        assert key == "projects/1_logo.png"
        assert kwargs["ExtraArgs"] == {"ContentType": "image/png"}
        assert "Config" not in kwargs

    def test_delete_object(self, r2_client: R2Client):
        with Stubber(r2_client._client) as stubber:
            stubber.add_response(
                "delete_object",
                {},
                {"Bucket": "test-bucket", "Key": "projects/1_logo.png"},
            )
            r2_client.delete_object("projects/1_logo.png")
            stubber.assert_no_pending_responses()

    def test_delete_object_error_propagates(self, r2_client: R2Client):
        with Stubber(r2_client._client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
            with pytest.raises(ClientError):
                r2_client.delete_object("projects/1_logo.png")

    def test_delete_objects_returns_errors(self, r2_client: R2Client):
        keys = ["a/1_a.png", "a/2_b.png"]
        with Stubber(r2_client._client) as stubber:
            stubber.add_response(
                "delete_objects",
                {"Errors": [{"Key": "a/2_b.png", "Code": "AccessDenied", "Message": "Access Denied"}]},
                {
                    "Bucket": "test-bucket",
                    "Delete": {"Objects": [{"Key": k} for k in keys], "Quiet": True},
                },
            )
            errors = r2_client.delete_objects(keys)

        assert errors == [{"Key": "a/2_b.png", "Code": "AccessDenied", "Message": "Access Denied"}]

    def test_delete_objects_chunks_large_lists(self, r2_client: R2Client):
        r2_client._client = MagicMock()
        r2_client._client.delete_objects.return_value = {}
        keys = [f"bulk/{i}_x.png" for i in range(DELETE_BATCH_SIZE + 5)]

        assert r2_client.delete_objects(keys) == []

        calls = r2_client._client.delete_objects.call_args_list
        assert len(calls) == 2
        assert len(calls[0].kwargs["Delete"]["Objects"]) == DELETE_BATCH_SIZE
        assert len(calls[1].kwargs["Delete"]["Objects"]) == 5
