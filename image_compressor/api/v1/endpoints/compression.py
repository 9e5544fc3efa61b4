"""
Compression endpoint.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from image_compressor.api.deps import get_worker
from image_compressor.compression.worker import CompressionWorker
from image_compressor.schemas import CompressionResponse, ErrorResponse

router = APIRouter()


@router.get(
    "/compress-image",
    response_model=CompressionResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Original not found or already expired"},
        504: {"model": ErrorResponse, "description": "Compression deadline exceeded"},
    },
)
def compress_image(
    key: str = Query(..., min_length=1, description="Key (or URL path) of the uploaded original"),
    quality: Optional[int] = Query(None, ge=0, le=100, description="JPEG quality, 0-100"),
    worker: CompressionWorker = Depends(get_worker),
):
    """
    Compress an uploaded original and return a short-lived download URL.

    **Errors:**
    - 404 ``source_not_found``: the original was never uploaded or has
      already been reclaimed by the retention sweep
    - 422 ``invalid_image``: the original is not a decodable image
    - 503 ``storage_unavailable``: the bucket could not be reached
    - 504 ``compression_timeout``: nothing was written
    """
    result = worker.compress(key, quality)

    return CompressionResponse(
        objectURL=result.object_url,
        key=result.compressed_key,
        original_size=result.original_size,
        compressed_size=result.compressed_size,
        quality=result.quality,
        expires_in_seconds=result.expires_in_seconds,
    )
