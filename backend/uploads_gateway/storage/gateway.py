"""
Upload gateway.

Sits between the API routes and the object store:
1. Validate the payload (presence, then type, then size)
2. Build a namespaced object key: {folder}/{epoch_millis}_{name}
3. Stream the payload to the bucket
4. Return a descriptor with the public URL and the key

The key doubles as the public id, so deleting an object needs no lookup.
Nothing is persisted here; callers own the key from then on.
"""
import asyncio
import logging
import re
import time
from typing import Optional, Protocol, Sequence
from urllib.parse import urlparse

from uploads_gateway.config import StorageConfig
from uploads_gateway.schemas.upload import StoredObjectDescriptor, UploadOutcome, UploadRequest
from uploads_gateway.storage.exceptions import (
    DeletionFailedError,
    InvalidUploadError,
    StorageNotConfiguredError,
    UploadError,
    UploadFailedError,
)
from uploads_gateway.utils.logging import log_deletion_failed, log_upload_completed, log_upload_failed
from uploads_gateway.utils.metrics import (
    deletions_total,
    upload_bytes_total,
    upload_duration_seconds,
    upload_rejections_total,
    uploads_total,
)

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = (
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
)

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

FALLBACK_FORMAT = 'bin'

_WHITESPACE = re.compile(r'\s+')


class StorageTransport(Protocol):
    """What the gateway needs from a storage client."""

    @property
    def bucket(self) -> str:
        ...

    def upload_bytes(self, object_key: str, data: bytes, content_type: str) -> None:
        ...

    def delete_object(self, object_key: str) -> None:
        ...

    def delete_objects(self, object_keys: list[str]) -> list[dict]:
        ...


def current_millis() -> int:
    """Milliseconds since the epoch, used as the key's time component."""
    return int(time.time() * 1000)


def sanitize_filename(filename: str) -> str:
    """Replace each whitespace run with an underscore. Nothing else is escaped."""
    return _WHITESPACE.sub('_', filename)


def extract_format(mime_type: Optional[str]) -> str:
    """Short format tag from the MIME subtype, e.g. image/png -> png."""
    _, _, subtype = (mime_type or '').partition('/')
    return subtype or FALLBACK_FORMAT


def resolve_public_base_url(config: StorageConfig) -> str:
    """
    Pick the URL prefix objects are served from.

    Priority:
    1. Explicit public domain (CDN / custom domain)
    2. Virtual-hosted style URL: https://{bucket}.{endpoint host}
    3. The raw endpoint
    """
    if config.public_domain:
        domain = config.public_domain.rstrip('/')
        if '://' not in domain:
            domain = f"https://{domain}"
        return domain

    endpoint_host = urlparse(config.endpoint or '').netloc
    if endpoint_host:
        return f"https://{config.bucket_name}.{endpoint_host}"

    return (config.endpoint or '').rstrip('/')


class UploadGateway:
    """
    Validates uploads and mediates all object storage access.

    Holds no mutable state after construction: the transport and the
    public base URL are fixed, so one instance serves every request.
    """

    def __init__(self, config: StorageConfig, client: Optional[StorageTransport] = None):
        missing = config.missing_fields()
        if missing:
            raise StorageNotConfiguredError(missing)

        self._config = config
        self.default_folder = config.default_folder
        self.public_base_url = resolve_public_base_url(config)

        if client is None:
            from uploads_gateway.storage.r2_client import R2Client
            client = R2Client(config)
        self._client = client

        logger.info(
            f"Upload gateway ready: bucket={config.bucket_name}, public_base={self.public_base_url}"
        )

    @property
    def bucket(self) -> str:
        return self._config.bucket_name

    def build_object_key(self, filename: str, folder: Optional[str] = None) -> str:
        prefix = folder or self.default_folder
        return f"{prefix}/{current_millis()}_{sanitize_filename(filename)}"

    def build_public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def validate(self, request: UploadRequest) -> None:
        """
        Check an upload before anything touches the network.

        Order is presence, type, size; the first failure wins.

        Raises:
            InvalidUploadError: with a client-safe message
        """
        if not request.payload:
            upload_rejections_total.labels(reason="empty").inc()
            raise InvalidUploadError("No file provided")

        if request.mime_type not in ALLOWED_MIME_TYPES:
            upload_rejections_total.labels(reason="type").inc()
            raise InvalidUploadError("Invalid file type. Allowed types: JPEG, PNG, GIF, WebP, SVG")

        if request.size_bytes > MAX_FILE_SIZE:
            upload_rejections_total.labels(reason="size").inc()
            raise InvalidUploadError("File size must be less than 5MB")

    async def store(self, request: UploadRequest) -> StoredObjectDescriptor:
        """
        Validate and upload one file.

        Args:
            request: Payload plus name, MIME type, size and optional folder

        Returns:
            Descriptor whose public_id is the object key

        Raises:
            InvalidUploadError: validation failed (no network call made)
            UploadFailedError: the backend rejected or dropped the write
        """
        self.validate(request)

        key = self.build_object_key(request.original_name, request.folder)
        start_time = time.time()

        failed = False
        try:
            await asyncio.to_thread(
                self._client.upload_bytes, key, request.payload, request.mime_type
            )
        except Exception as e:
            duration = time.time() - start_time
            uploads_total.labels(status="failed").inc()
            upload_duration_seconds.labels(status="failed").observe(duration)
            log_upload_failed(logger, key=key, bucket=self.bucket, error=str(e), duration_ms=duration * 1000)
            failed = True

        # Raised outside the except block so the backend error is not attached as __context__
        if failed:
            raise UploadFailedError("Failed to upload file")

        duration = time.time() - start_time
        uploads_total.labels(status="success").inc()
        upload_bytes_total.inc(request.size_bytes)
        upload_duration_seconds.labels(status="success").observe(duration)
        log_upload_completed(
            logger,
            key=key,
            bucket=self.bucket,
            size_bytes=request.size_bytes,
            duration_ms=duration * 1000,
            content_type=request.mime_type,
        )

        return StoredObjectDescriptor(
            url=self.build_public_url(key),
            public_id=key,
            format=extract_format(request.mime_type),
            bytes=request.size_bytes,
        )

    async def store_many(self, requests: Sequence[UploadRequest]) -> list[StoredObjectDescriptor]:
        """
        Upload all files concurrently; any failure fails the whole call.

        Objects uploaded before the failure are left in the bucket. Use
        store_many_settled when the caller needs to clean those up.
        """
        return list(await asyncio.gather(*(self.store(r) for r in requests)))

    async def store_many_settled(self, requests: Sequence[UploadRequest]) -> list[UploadOutcome]:
        """Upload all files concurrently and report one outcome per input, in order."""
        results = await asyncio.gather(
            *(self.store(r) for r in requests),
            return_exceptions=True,
        )

        outcomes = []
        for index, (request, result) in enumerate(zip(requests, results)):
            if isinstance(result, UploadError):
                outcomes.append(UploadOutcome(
                    index=index,
                    original_name=request.original_name,
                    ok=False,
                    error=result.message,
                ))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(UploadOutcome(
                    index=index,
                    original_name=request.original_name,
                    ok=True,
                    descriptor=result,
                ))
        return outcomes

    async def delete(self, key: str) -> bool:
        """
        Delete one object by key.

        Deleting a key that does not exist is left to the backend (R2 and
        S3 report success), so True does not prove the object existed.

        Raises:
            InvalidUploadError: key is empty (no network call made)
            DeletionFailedError: the backend rejected the delete
        """
        if not key:
            raise InvalidUploadError("Public ID is required")

        failed = False
        try:
            await asyncio.to_thread(self._client.delete_object, key)
        except Exception as e:
            deletions_total.labels(mode="single", status="failed").inc()
            log_deletion_failed(logger, bucket=self.bucket, error=str(e), key=key)
            failed = True

        if failed:
            raise DeletionFailedError("Failed to delete file")

        deletions_total.labels(mode="single", status="success").inc()
        logger.info(f"Deleted object {key}", extra={"event": "object_deleted", "key": key})
        return True

    async def delete_many(self, keys: Sequence[str]) -> None:
        """
        Delete several objects in one batch request.

        No per-key result: either everything went through or
        DeletionFailedError is raised.
        """
        if not keys:
            return

        key_list = list(keys)
        errors = None
        try:
            errors = await asyncio.to_thread(self._client.delete_objects, key_list)
        except Exception as e:
            deletions_total.labels(mode="batch", status="failed").inc()
            log_deletion_failed(logger, bucket=self.bucket, error=str(e), key_count=len(key_list))

        if errors is None:
            raise DeletionFailedError("Failed to delete files")

        if errors:
            for error in errors[:5]:  # Log first 5 errors
                logger.warning(
                    f"Failed to delete {error.get('Key')}: "
                    f"{error.get('Code')} - {error.get('Message')}"
                )
            deletions_total.labels(mode="batch", status="failed").inc()
            log_deletion_failed(
                logger,
                bucket=self.bucket,
                error=f"{len(errors)} of {len(key_list)} keys not deleted",
                key_count=len(key_list),
            )
            raise DeletionFailedError("Failed to delete files")

        deletions_total.labels(mode="batch", status="success").inc()
        logger.info(f"Batch delete complete: {len(key_list)} keys")
