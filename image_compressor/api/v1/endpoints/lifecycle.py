"""
Lifecycle management endpoints: manual sweep trigger and queue status.
"""
from fastapi import APIRouter, Depends

from image_compressor.api.deps import get_components, get_sweeper
from image_compressor.bootstrap import Components
from image_compressor.lifecycle.sweeper import RetentionSweeper
from image_compressor.schemas import QueueStatusResponse, RetentionPolicyResponse, SweepResponse

router = APIRouter()


@router.post("/sweep", response_model=SweepResponse)
def run_sweep(sweeper: RetentionSweeper = Depends(get_sweeper)):
    """
    Run one retention sweep tick now.

    Same work as a scheduled tick: claims up to ``SWEEP_MAX_RECORDS`` records
    and deletes the originals that are past the retention window.
    """
    return sweeper.sweep().to_dict()


@router.get("/queue", response_model=QueueStatusResponse)
def queue_status(components: Components = Depends(get_components)):
    """Approximate number of lifecycle records waiting on the delay queue."""
    return QueueStatusResponse(
        queue=components.queue.name,
        pending=components.queue.approximate_size(),
    )


@router.get("/policy", response_model=RetentionPolicyResponse)
async def retention_policy(components: Components = Depends(get_components)):
    """Active retention policy."""
    return components.policy.to_dict()
