"""
Schemas for upload requests and API responses.
"""
from uploads_gateway.schemas.upload import (
    UploadRequest,
    StoredObjectDescriptor,
    UploadOutcome,
    DeleteResult,
    ApiResponse,
    ErrorResponse,
)

__all__ = [
    "UploadRequest",
    "StoredObjectDescriptor",
    "UploadOutcome",
    "DeleteResult",
    "ApiResponse",
    "ErrorResponse",
]
