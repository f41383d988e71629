"""
Storage module for S3-compatible object storage (Cloudflare R2).

Files are posted to the API and streamed to the bucket by the upload
gateway, which returns a public URL and the object key.
"""
from uploads_gateway.storage.exceptions import (
    UploadError,
    InvalidUploadError,
    UploadFailedError,
    DeletionFailedError,
    StorageNotConfiguredError,
)
from uploads_gateway.storage.gateway import UploadGateway

__all__ = [
    "UploadGateway",
    "UploadError",
    "InvalidUploadError",
    "UploadFailedError",
    "DeletionFailedError",
    "StorageNotConfiguredError",
]
