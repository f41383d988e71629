"""
FastAPI dependencies for the upload routes.
"""
from fastapi import HTTPException, Request, status

from uploads_gateway.storage.gateway import UploadGateway


def get_upload_gateway(request: Request) -> UploadGateway:
    """
    Return the gateway built at startup.

    The app lifespan stores it on app.state; tests override this
    dependency with a gateway wired to a fake transport.
    """
    gateway = getattr(request.app.state, "upload_gateway", None)
    # Only reachable when the lifespan did not run (tests, embedded apps);
    # a misconfigured server never starts.
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage service not configured"
        )
    return gateway
