"""
Health check endpoint.
Reports whether the upload gateway was configured at startup.
"""
from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("")
async def health_check(request: Request):
    """
    Health check endpoint.
    Returns status of the object storage wiring.
    """
    gateway = getattr(request.app.state, "upload_gateway", None)

    # Missing credentials abort startup, so this only fires when the
    # lifespan was skipped (tests, embedded apps).
    if gateway is None:
        raise HTTPException(
            status_code=503,
            detail={"status": "unhealthy", "storage": "not configured"}
        )

    return {
        "status": "healthy",
        "storage": "configured",
        "bucket": gateway.bucket,
        "public_base_url": gateway.public_base_url,
    }
