"""
Retention Sweeper

Runs on a fixed cadence (daily by default). Each tick claims a bounded
number of lifecycle records from the delay queue and, per record:

- age below the threshold   -> leave it on the queue (deferred)
- age at/over the threshold -> delete the original, then acknowledge (retired)
- delete fails              -> leave it on the queue for a later tick (failed)
- unparseable body          -> acknowledge and log (dropped)
- unusable bucket or key    -> acknowledge and log (dropped)

The queue is the only ledger of deletion candidates; nothing is lost unless
the blob delete succeeded first.
"""
import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from image_compressor.core.exceptions import (
    MalformedRecordError,
    QueueUnavailableError,
    StorageError,
)
from image_compressor.lifecycle.policy import RetentionPolicy
from image_compressor.lifecycle.record import LifecycleRecord
from image_compressor.metrics import record_sweep_outcome, record_sweep_run
from image_compressor.queue.base import QueueMessage, epoch_ms
from image_compressor.storage.keys import KeyNamespace

logger = logging.getLogger(__name__)


class SweepOutcome(str, Enum):
    """What happened to one claimed record."""
    RETIRED = "retired"
    DEFERRED = "deferred"
    FAILED = "failed"
    DROPPED = "dropped"


@dataclass
class RecordOutcome:
    message_id: str
    outcome: SweepOutcome
    key: Optional[str] = None
    age_ms: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message_id': self.message_id,
            'outcome': self.outcome.value,
            'key': self.key,
            'age_ms': self.age_ms,
            'error': self.error,
        }


@dataclass
class SweepResult:
    """
    Sweep tick result
    """
    outcomes: List[RecordOutcome] = field(default_factory=list)
    duration_seconds: float = 0.0

    def _count(self, outcome: SweepOutcome) -> int:
        return sum(1 for o in self.outcomes if o.outcome == outcome)

    @property
    def claimed(self) -> int:
        return len(self.outcomes)

    @property
    def retired(self) -> int:
        return self._count(SweepOutcome.RETIRED)

    @property
    def deferred(self) -> int:
        return self._count(SweepOutcome.DEFERRED)

    @property
    def failed(self) -> int:
        return self._count(SweepOutcome.FAILED)

    @property
    def dropped(self) -> int:
        return self._count(SweepOutcome.DROPPED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'claimed': self.claimed,
            'retired': self.retired,
            'deferred': self.deferred,
            'failed': self.failed,
            'dropped': self.dropped,
            'duration_seconds': round(self.duration_seconds, 3),
            'outcomes': [o.to_dict() for o in self.outcomes],
        }


class RetentionSweeper:
    """
    Delay-queue driven retention sweeper

    Features:
    - Bounded work per tick (``max_records``, default 1)
    - Inclusive age threshold
    - Idempotent deletes, so overlapping ticks are harmless
    - Malformed records are dropped without blocking the rest of the batch
    - Compressed copies are never deleted
    """

    def __init__(
        self,
        queue,
        blob_store,
        policy: RetentionPolicy,
        namespace: KeyNamespace,
        max_records: int = 1,
        visibility_timeout: int = 0,
        defer_until_due: bool = False,
        clock: Callable[[], int] = epoch_ms
    ):
        """
        Initialize retention sweeper

        Args:
            queue: Delay queue holding lifecycle records
            blob_store: Store the originals are deleted from
            policy: Retention policy deciding when a record is due
            namespace: Key namespace (protects compressed copies)
            max_records: Maximum records claimed per tick
            visibility_timeout: Seconds a claimed record stays hidden
            defer_until_due: Hide deferred records until their due time
            clock: Returns the current time in epoch milliseconds
        """
        self.queue = queue
        self.blob_store = blob_store
        self.policy = policy
        self.namespace = namespace
        self.max_records = max_records
        self.visibility_timeout = visibility_timeout
        self.defer_until_due = defer_until_due
        self.clock = clock

    def sweep(self) -> SweepResult:
        """
        Run one sweep tick.

        Raises:
            QueueUnavailableError: no records could be claimed
        """
        start_time = time.time()

        try:
            messages = self.queue.receive(
                max_messages=self.max_records,
                visibility_timeout=self.visibility_timeout
            )
        except QueueUnavailableError:
            record_sweep_run(False, time.time() - start_time)
            logger.error("Sweep aborted: delay queue unavailable")
            raise

        result = SweepResult()

        if not messages:
            logger.info("No lifecycle records to sweep")

        for message in messages:
            outcome = self._process(message)
            record_sweep_outcome(outcome.outcome.value)
            result.outcomes.append(outcome)

        result.duration_seconds = time.time() - start_time
        record_sweep_run(True, result.duration_seconds)

        logger.info(
            f"Sweep completed: {result.claimed} claimed, {result.retired} retired, "
            f"{result.deferred} deferred, {result.failed} failed, {result.dropped} dropped "
            f"({result.duration_seconds:.2f}s)"
        )

        return result

    def _process(self, message: QueueMessage) -> RecordOutcome:
        try:
            record = LifecycleRecord.from_json(message.body)
        except MalformedRecordError as e:
            logger.warning(
                f"Dropping malformed lifecycle record {message.message_id}: {e}",
                extra={"message_id": message.message_id},
            )
            return self._drop(message, str(e))

        if self.namespace.is_compressed(record.key):
            logger.warning(f"Dropping lifecycle record for compressed copy '{record.key}'")
            return self._drop(message, "compressed copies are not retention candidates", record.key)

        now = self.clock()
        age = record.age_ms(now)

        if not self.policy.is_due(record, now):
            self._rearm(message, record, now)
            logger.info(
                f"Deferred {record.bucket}/{record.key} (age {age}ms < {self.policy.threshold_ms}ms)",
                extra={"key": record.key, "age_ms": age},
            )
            return RecordOutcome(message.message_id, SweepOutcome.DEFERRED, record.key, age)

        try:
            self.blob_store.delete_object(record.key, bucket=record.bucket)
        except ValueError as e:
            # Client-side argument validation (bucket name, key); retrying cannot succeed
            logger.warning(
                f"Dropping lifecycle record {message.message_id} with unusable location "
                f"{record.bucket!r}/{record.key!r}: {e}",
                extra={"message_id": message.message_id},
            )
            return self._drop(message, str(e), record.key)
        except StorageError as e:
            logger.error(
                f"Failed to delete {record.bucket}/{record.key}, keeping record: {e}",
                extra={"key": record.key, "age_ms": age},
            )
            return RecordOutcome(message.message_id, SweepOutcome.FAILED, record.key, age, str(e))

        try:
            if not self.queue.delete(message.receipt_handle):
                logger.info(f"Record {message.message_id} already acknowledged by another sweep")
        except QueueUnavailableError as e:
            # Blob is gone; the record stays and the next delete is a no-op
            logger.error(f"Deleted {record.key} but could not acknowledge record: {e}")
            return RecordOutcome(message.message_id, SweepOutcome.FAILED, record.key, age, str(e))

        logger.info(
            f"Retired {record.bucket}/{record.key} (age {age}ms)",
            extra={"key": record.key, "age_ms": age},
        )
        return RecordOutcome(message.message_id, SweepOutcome.RETIRED, record.key, age)

    def _rearm(self, message: QueueMessage, record: LifecycleRecord, now: int) -> None:
        if not self.defer_until_due:
            return

        wait_seconds = math.ceil((self.policy.due_at(record) - now) / 1000)
        try:
            self.queue.change_visibility(message.receipt_handle, wait_seconds)
        except QueueUnavailableError as e:
            # Still on the queue, just visible earlier than intended
            logger.warning(f"Could not delay record {message.message_id}: {e}")

    def _drop(self, message: QueueMessage, reason: str, key: Optional[str] = None) -> RecordOutcome:
        try:
            self.queue.delete(message.receipt_handle)
        except QueueUnavailableError as e:
            logger.error(f"Could not drop record {message.message_id}: {e}")
            return RecordOutcome(message.message_id, SweepOutcome.FAILED, key, error=str(e))

        return RecordOutcome(message.message_id, SweepOutcome.DROPPED, key, error=reason)
