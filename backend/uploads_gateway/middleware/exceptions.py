"""
Exception handlers for consistent error responses.

Gateway errors become a 400 with the generic message only; the storage
backend's own error text stays in the logs.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from uploads_gateway.schemas.upload import ErrorResponse
from uploads_gateway.storage.exceptions import UploadError

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build the error body shared by every handler."""
    body = ErrorResponse(
        status_code=status_code,
        message=message,
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
    logger.warning(
        f"Upload request failed: {exc.message}",
        extra={
            "event": "upload_request_failed",
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
        },
    )
    return error_response(request, exc.status_code, exc.message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UploadError, upload_error_handler)
