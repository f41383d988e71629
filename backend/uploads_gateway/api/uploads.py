"""
Upload endpoints.

1. POST /uploads/image - Upload a single image
2. POST /uploads/images - Upload several images (max 10)
3. DELETE /uploads/{public_id} - Delete an uploaded file by key

Files arrive as multipart/form-data and are streamed to R2 by the
upload gateway. Responses are wrapped as {statusCode, message, data}.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from uploads_gateway.api.dependencies import get_upload_gateway
from uploads_gateway.config import settings
from uploads_gateway.schemas.upload import (
    ApiResponse,
    DeleteResult,
    StoredObjectDescriptor,
    UploadRequest,
)
from uploads_gateway.storage.exceptions import InvalidUploadError
from uploads_gateway.storage.gateway import UploadGateway

router = APIRouter()

FOLDER_DESCRIPTION = "R2 folder/prefix (e.g., projects, blog)"


def _resolve_folder(gateway: UploadGateway, folder: Optional[str]) -> Optional[str]:
    """Sub-folders always live under the default namespace."""
    return f"{gateway.default_folder}/{folder}" if folder else None


async def _to_upload_request(file: Optional[UploadFile], folder: Optional[str]) -> UploadRequest:
    if file is None:
        return UploadRequest(payload=None, original_name="", mime_type="", folder=folder)

    payload = await file.read()
    return UploadRequest(
        payload=payload,
        original_name=file.filename or "",
        mime_type=file.content_type or "",
        size_bytes=file.size if file.size is not None else len(payload),
        folder=folder,
    )


@router.post(
    "/image",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[StoredObjectDescriptor],
)
async def upload_image(
    file: Optional[UploadFile] = File(None),
    folder: Optional[str] = Query(None, description=FOLDER_DESCRIPTION),
    gateway: UploadGateway = Depends(get_upload_gateway),
):
    """
    Upload a single image.

    Allowed types: JPEG, PNG, GIF, WebP, SVG. Max size 5MB.
    """
    request = await _to_upload_request(file, _resolve_folder(gateway, folder))
    descriptor = await gateway.store(request)

    return ApiResponse[StoredObjectDescriptor](
        status_code=status.HTTP_201_CREATED,
        message="Image uploaded successfully",
        data=descriptor,
    )


@router.post(
    "/images",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[List[StoredObjectDescriptor]],
)
async def upload_images(
    files: Optional[List[UploadFile]] = File(None),
    folder: Optional[str] = Query(None, description=FOLDER_DESCRIPTION),
    gateway: UploadGateway = Depends(get_upload_gateway),
):
    """
    Upload multiple images (max 10).

    All files are uploaded concurrently. If any one fails the request
    fails; files that were already stored are not removed.
    """
    if not files:
        raise InvalidUploadError("No files provided")

    if len(files) > settings.upload_max_files:
        raise InvalidUploadError(f"Too many files. Maximum is {settings.upload_max_files}")

    resolved_folder = _resolve_folder(gateway, folder)
    requests = [await _to_upload_request(f, resolved_folder) for f in files]
    descriptors = await gateway.store_many(requests)

    return ApiResponse[List[StoredObjectDescriptor]](
        status_code=status.HTTP_201_CREATED,
        message="Images uploaded successfully",
        data=descriptors,
    )


@router.delete("/{public_id:path}", response_model=ApiResponse[DeleteResult])
async def delete_file(
    public_id: str,
    gateway: UploadGateway = Depends(get_upload_gateway),
):
    """
    Delete an uploaded file.

    The key is sent URL-encoded (slashes as %2F); it arrives here decoded.
    """
    deleted = await gateway.delete(public_id)

    return ApiResponse[DeleteResult](
        status_code=status.HTTP_200_OK,
        message="File deleted successfully",
        data=DeleteResult(deleted=deleted),
    )
