"""
API response schemas.

Field names of the upload and compression responses (``uploadUrl``,
``objectURL``) are what the browser client reads.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class UploadURLResponse(BaseModel):
    """Presigned PUT URL for a new original."""
    uploadUrl: str = Field(..., description="Presigned PUT URL")
    key: str = Field(..., description="Object key the upload will be stored under")
    expires_in_seconds: int


class CompressionResponse(BaseModel):
    """Presigned GET URL for the compressed copy."""
    objectURL: str = Field(..., description="Presigned GET URL of the compressed copy")
    key: str = Field(..., description="Key of the compressed copy")
    original_size: int
    compressed_size: int
    quality: int
    expires_in_seconds: int


class ObjectCreatedResponse(BaseModel):
    recorded: int = Field(..., description="Number of lifecycle records enqueued")
    keys: List[str] = []


class SweepOutcomeResponse(BaseModel):
    message_id: str
    outcome: str
    key: Optional[str] = None
    age_ms: Optional[int] = None
    error: Optional[str] = None


class SweepResponse(BaseModel):
    claimed: int
    retired: int
    deferred: int
    failed: int
    dropped: int
    duration_seconds: float
    outcomes: List[SweepOutcomeResponse] = []


class QueueStatusResponse(BaseModel):
    queue: str
    pending: int = Field(..., description="Approximate number of lifecycle records on the queue")


class RetentionPolicyResponse(BaseModel):
    name: str
    threshold_ms: int
    description: str


class ErrorResponse(BaseModel):
    error: str
    code: str
    status_code: int
