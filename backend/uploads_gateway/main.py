"""
FastAPI application entry point.
Sets up the API with lifespan events for storage initialization.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from uploads_gateway.config import settings
from uploads_gateway.api.router import api_router
from uploads_gateway.middleware.exceptions import register_exception_handlers
from uploads_gateway.middleware.metrics_middleware import MetricsMiddleware
from uploads_gateway.storage.gateway import UploadGateway
from uploads_gateway.utils.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure logging and build the upload gateway
    - Shutdown: Nothing to release; the boto3 client needs no close
    """
    configure_logging('uploads-api', settings.log_level)

    # Missing storage credentials are fatal: raising here aborts startup
    app.state.upload_gateway = UploadGateway(settings.storage_config())

    yield


# Create FastAPI app
app = FastAPI(
    title="Uploads API",
    description="Image upload gateway backed by S3-compatible object storage",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware (for the admin panel)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Uploads API",
        "version": "0.1.0",
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
