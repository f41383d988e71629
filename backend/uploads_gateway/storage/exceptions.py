"""
Errors raised by the upload gateway.

Every storage failure is folded into one of these before it leaves the
gateway. The message is generic and safe to show to clients; the backend
cause is only logged.
"""
from typing import Optional


class UploadError(Exception):
    """Base class for gateway errors surfaced to callers."""

    status_code = 400
    default_message = "Upload error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidUploadError(UploadError):
    """Payload or metadata rejected before any network call."""

    default_message = "Invalid upload"


class UploadFailedError(UploadError):
    """The storage backend could not complete a write."""

    default_message = "Failed to upload file"


class DeletionFailedError(UploadError):
    """The storage backend rejected a delete or batch delete."""

    default_message = "Failed to delete file"


class StorageNotConfiguredError(RuntimeError):
    """Required storage credentials are missing at startup."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "Object storage not configured. Set " + ", ".join(missing) + "."
        )
