"""
Bucket notification webhook.

Configure the bucket to send ``s3:ObjectCreated:*`` events here, e.g. with
``mc event add <alias>/<bucket> arn:minio:sqs::lifecycle:webhook --event put``.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from image_compressor.api.deps import get_recorder
from image_compressor.lifecycle.recorder import LifecycleRecorder
from image_compressor.schemas import ObjectCreatedResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/object-created", response_model=ObjectCreatedResponse)
async def object_created(
    event: Dict[str, Any] = Body(...),
    recorder: LifecycleRecorder = Depends(get_recorder),
):
    """
    Record a lifecycle entry for each uploaded original in the notification.

    A 503 tells the notifier to redeliver; duplicate records are harmless.
    """
    records = recorder.record_event(event)

    return ObjectCreatedResponse(
        recorded=len(records),
        keys=[record.key for record in records],
    )
