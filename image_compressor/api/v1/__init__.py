"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from image_compressor.api.v1.endpoints import compression, events, lifecycle, uploads

api_router = APIRouter()

# Upload URL and compression endpoints keep the paths the browser client uses
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(compression.router, tags=["compression"])

# Bucket notifications (lifecycle recorder)
api_router.include_router(events.router, prefix="/events", tags=["events"])

# Retention sweep management
api_router.include_router(lifecycle.router, prefix="/lifecycle", tags=["lifecycle"])

__all__ = ["api_router"]
