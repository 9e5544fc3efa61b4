"""
Object lifecycle pipeline

- LifecycleRecord: delay-queue note of when an original was uploaded
- RetentionPolicy: age threshold after which originals are deleted
- LifecycleRecorder: enqueues a record per uploaded original
- RetentionSweeper: periodic claim-evaluate-delete loop over the queue
"""

from .record import LifecycleRecord
from .policy import RetentionPolicy
from .recorder import LifecycleRecorder
from .sweeper import RetentionSweeper, SweepResult, SweepOutcome, RecordOutcome

__all__ = [
    'LifecycleRecord',
    'RetentionPolicy',
    'LifecycleRecorder',
    'RetentionSweeper',
    'SweepResult',
    'SweepOutcome',
    'RecordOutcome',
]
