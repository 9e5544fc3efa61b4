"""
Upload URL endpoint.

Clients upload originals straight to the bucket with a presigned PUT URL;
the resulting object-created notification starts its lifecycle.
"""
from fastapi import APIRouter, Depends, Query

from image_compressor.api.deps import get_components
from image_compressor.bootstrap import Components
from image_compressor.core.exceptions import InvalidUploadRequestError
from image_compressor.schemas import UploadURLResponse

router = APIRouter()


@router.get("/generate-upload-url", response_model=UploadURLResponse)
async def generate_upload_url(
    fileName: str = Query(..., min_length=1, description="Client file name; only its extension is kept"),
    contentType: str = Query(..., min_length=1, description="MIME type of the upload"),
    components: Components = Depends(get_components),
):
    """
    Get a presigned PUT URL for a new original.

    The object is stored as ``uploads/<epoch-millis>.<ext>`` and is deleted
    by the retention sweep once it is older than the retention window.
    """
    if contentType not in components.settings.ALLOWED_IMAGE_TYPES:
        raise InvalidUploadRequestError(
            f"Content type '{contentType}' is not allowed; "
            f"expected one of {', '.join(components.settings.ALLOWED_IMAGE_TYPES)}"
        )

    presigned = components.url_generator.generate_upload_url(fileName)

    return UploadURLResponse(
        uploadUrl=presigned.url,
        key=presigned.object_name,
        expires_in_seconds=presigned.expires_in_seconds,
    )
