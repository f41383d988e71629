"""
Cloudflare R2 / S3-compatible storage client.

Uses boto3 with the S3-compatible API. Works with any S3-compatible
storage (R2, S3, MinIO).

Unlike a presign-only client, this one moves the bytes itself: the admin
panel posts files to the API and the API streams them to the bucket.
Errors are not swallowed here; the upload gateway decides how they
surface to callers.
"""
import io
import logging
from typing import Any

import boto3
from botocore.config import Config

from uploads_gateway.config import StorageConfig

logger = logging.getLogger(__name__)

# S3 batch delete supports max 1000 objects per call
DELETE_BATCH_SIZE = 1000


class R2Client:
    """
    S3-compatible client bound to a single bucket.

    The underlying boto3 client is created once and shared by every
    request; it is never mutated after construction.
    """

    def __init__(self, config: StorageConfig):
        self._bucket = config.bucket_name
        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region,
            config=Config(signature_version='s3v4'),
        )
        logger.info(f"R2 client initialized for bucket: {self._bucket}")

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self._bucket

    def upload_bytes(self, object_key: str, data: bytes, content_type: str) -> None:
        """
        Upload a payload with boto3's managed transfer.

        boto3 switches to a multipart upload above its default threshold
        (8MB), which the 5MB upload limit keeps out of reach today.

        Args:
            object_key: The S3 object key (path in bucket)
            data: File body
            content_type: MIME type stored as the object's Content-Type
        """
        self._client.upload_fileobj(
            io.BytesIO(data),
            self._bucket,
            object_key,
            ExtraArgs={'ContentType': content_type},
        )
        logger.debug(f"Uploaded {object_key} ({len(data)} bytes)")

    def delete_object(self, object_key: str) -> None:
        """Delete an object from the bucket."""
        self._client.delete_object(Bucket=self._bucket, Key=object_key)
        logger.debug(f"Deleted object {object_key} from R2")

    def delete_objects(self, object_keys: list[str]) -> list[dict[str, Any]]:
        """
        Delete multiple objects in batch.

        Lists longer than the S3 limit are chunked, one request per chunk.

        Args:
            object_keys: List of S3 object keys to delete

        Returns:
            The backend's per-key error entries (empty when all succeeded)
        """
        errors: list[dict[str, Any]] = []

        for i in range(0, len(object_keys), DELETE_BATCH_SIZE):
            batch = object_keys[i:i + DELETE_BATCH_SIZE]
            response = self._client.delete_objects(
                Bucket=self._bucket,
                Delete={
                    'Objects': [{'Key': key} for key in batch],
                    'Quiet': True  # Only return errors, not successes
                }
            )
            errors.extend(response.get('Errors', []))

        logger.debug(f"Batch delete: {len(object_keys)} keys, {len(errors)} errors")
        return errors
