"""
Pydantic schemas for request/response validation.
"""
from image_compressor.schemas.api import (
    UploadURLResponse,
    CompressionResponse,
    ObjectCreatedResponse,
    SweepOutcomeResponse,
    SweepResponse,
    QueueStatusResponse,
    RetentionPolicyResponse,
    ErrorResponse,
)

__all__ = [
    "UploadURLResponse",
    "CompressionResponse",
    "ObjectCreatedResponse",
    "SweepOutcomeResponse",
    "SweepResponse",
    "QueueStatusResponse",
    "RetentionPolicyResponse",
    "ErrorResponse",
]
