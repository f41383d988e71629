"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- key
- bucket
- bytes
- duration_ms

Usage:
    from uploads_gateway.utils.logging import configure_logging, log_upload_completed

    configure_logging('uploads-api', 'INFO')
    log_upload_completed(logger, key='smart-agency/1700000000_logo.png', bucket='media', size_bytes=1024)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (uploads-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(level)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    key: Optional[str] = None,
    bucket: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        key: Optional object key
        bucket: Optional bucket name
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if key:
        extra["key"] = key
    if bucket:
        extra["bucket"] = bucket
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


def log_upload_completed(
    logger: logging.Logger,
    key: str,
    bucket: str,
    size_bytes: int,
    duration_ms: Optional[float] = None,
    content_type: Optional[str] = None,
    **kwargs
):
    """Log a successful upload."""
    extra = _build_log_extra(
        event="upload_completed",
        key=key,
        bucket=bucket,
        duration_ms=duration_ms,
        bytes=size_bytes,
        **kwargs
    )
    if content_type:
        extra["content_type"] = content_type

    logger.info(f"Upload completed: {key}", extra=extra)


def log_upload_failed(
    logger: logging.Logger,
    key: str,
    bucket: str,
    error: str,
    duration_ms: Optional[float] = None,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log an upload the storage backend could not complete.

    Args:
        logger: Logger instance
        key: Object key that was being written (required)
        bucket: Target bucket (required)
        error: Backend error message (required)
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace (default: True)
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_failed",
        key=key,
        bucket=bucket,
        duration_ms=duration_ms,
        error=str(error),
        **kwargs
    )

    message = f"Failed to upload file: {error}"

    if include_traceback and sys.exc_info()[0] is not None:
        logger.error(message, extra=extra, exc_info=True)
    else:
        logger.error(message, extra=extra)


def log_deletion_failed(
    logger: logging.Logger,
    bucket: str,
    error: str,
    key: Optional[str] = None,
    key_count: Optional[int] = None,
    **kwargs
):
    """
    Log a delete or batch delete the backend rejected.

    Args:
        logger: Logger instance
        bucket: Target bucket (required)
        error: Backend error message (required)
        key: Object key for single deletes
        key_count: Number of keys for batch deletes
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="deletion_failed",
        key=key,
        bucket=bucket,
        error=str(error),
        **kwargs
    )
    if key_count is not None:
        extra["key_count"] = key_count

    if key:
        message = f"Failed to delete file {key}: {error}"
    else:
        message = f"Failed to delete files: {error}"

    logger.error(message, extra=extra)


# Convenience alias
def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
