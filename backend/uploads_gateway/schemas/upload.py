"""
Schemas for upload requests and stored-object descriptors.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


@dataclass
class UploadRequest:
    """
    A single file handed to the gateway.

    Not a stored entity. The gateway reads the payload during the call and
    keeps no reference to it afterwards.
    """
    payload: Optional[bytes]
    original_name: str
    mime_type: str
    size_bytes: Optional[int] = None
    folder: Optional[str] = None

    def __post_init__(self):
        if self.size_bytes is None:
            self.size_bytes = len(self.payload) if self.payload else 0


class StoredObjectDescriptor(BaseModel):
    """Result of a successful upload."""
    url: str = Field(..., description="Public URL of the uploaded file")
    public_id: str = Field(..., alias="publicId", description="Object key used to manage the file")
    format: str = Field(..., description="File format inferred from the MIME type")
    bytes: int = Field(..., description="File size in bytes")
    width: Optional[int] = Field(None, description="Image width (for images)")
    height: Optional[int] = Field(None, description="Image height (for images)")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "url": "https://assets.smartagency.com/smart-agency/projects/1700000000_logo.png",
                "publicId": "smart-agency/projects/1700000000_logo.png",
                "format": "png",
                "bytes": 102400
            }
        }
    )

    @property
    def key(self) -> str:
        """The storage key; same value as public_id."""
        return self.public_id


class UploadOutcome(BaseModel):
    """Per-item result of a settled batch upload."""
    index: int
    original_name: str
    ok: bool
    descriptor: Optional[StoredObjectDescriptor] = None
    error: Optional[str] = None


class DeleteResult(BaseModel):
    """Schema for delete response payload."""
    deleted: bool


class ApiResponse(BaseModel, Generic[T]):
    """Envelope used by every upload endpoint."""
    status_code: int = Field(..., alias="statusCode")
    message: str
    data: T

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Body returned when a request fails."""
    status_code: int = Field(..., alias="statusCode")
    message: str
    timestamp: str
    path: str

    model_config = ConfigDict(populate_by_name=True)
