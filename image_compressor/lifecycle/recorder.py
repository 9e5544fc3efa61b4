"""
Lifecycle Recorder

Turns object-created notifications from the bucket into lifecycle records
on the delay queue. One record per uploaded original; duplicates under
at-least-once notification delivery are tolerated by the sweeper.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from image_compressor.core.exceptions import MalformedEventError, QueueUnavailableError
from image_compressor.lifecycle.record import LifecycleRecord
from image_compressor.metrics import record_lifecycle_enqueue
from image_compressor.queue.base import epoch_ms
from image_compressor.storage.keys import KeyNamespace

logger = logging.getLogger(__name__)


class LifecycleRecorder:
    """
    Writes a lifecycle record for every uploaded original.

    Keys outside the originals namespace (compressed copies in particular)
    never get a record, so the sweeper never sees them.
    """

    def __init__(
        self,
        queue,
        namespace: KeyNamespace,
        clock: Callable[[], int] = epoch_ms
    ):
        """
        Args:
            queue: Delay queue receiving the records
            namespace: Key namespace deciding which keys are originals
            clock: Returns the current time in epoch milliseconds
        """
        self.queue = queue
        self.namespace = namespace
        self.clock = clock

    def record(self, bucket: str, key: str) -> Optional[LifecycleRecord]:
        """
        Enqueue a lifecycle record for ``bucket/key``.

        Returns:
            The enqueued record, or None if the key is not an original

        Raises:
            QueueUnavailableError: the record could not be enqueued
        """
        if not self.namespace.is_original(key):
            logger.info(f"Skipping lifecycle record for non-original key '{key}'")
            record_lifecycle_enqueue("skipped")
            return None

        record = LifecycleRecord(bucket=bucket, key=key, created_at=self.clock())

        try:
            self.queue.send(record.to_json())
        except QueueUnavailableError:
            logger.error(
                f"Failed to enqueue lifecycle record for {bucket}/{key}",
                extra={"bucket": bucket, "key": key},
            )
            record_lifecycle_enqueue("failed")
            raise

        record_lifecycle_enqueue("success")
        logger.info(
            f"Recorded lifecycle for {bucket}/{key}",
            extra={"bucket": bucket, "key": key, "created_at": record.created_at},
        )
        return record

    def record_event(self, event: Dict[str, Any]) -> List[LifecycleRecord]:
        """
        Record every object in an S3/MinIO ``s3:ObjectCreated:*`` notification.

        Expected shape::

            {"Records": [{"eventName": "s3:ObjectCreated:Put",
                          "s3": {"bucket": {"name": "..."}, "object": {"key": "..."}}}]}

        Raises:
            MalformedEventError: the notification carries no usable records
            QueueUnavailableError: a record could not be enqueued
        """
        entries = event.get("Records") if isinstance(event, dict) else None
        if not entries or not isinstance(entries, list):
            raise MalformedEventError("Notification has no 'Records'")

        # Validate the whole notification before enqueueing anything
        created = []
        for entry in entries:
            event_name = entry.get("eventName", "") if isinstance(entry, dict) else ""
            if event_name and "ObjectCreated" not in event_name:
                logger.debug(f"Ignoring notification '{event_name}'")
                continue

            try:
                bucket = entry["s3"]["bucket"]["name"]
                raw_key = entry["s3"]["object"]["key"]
            except (KeyError, TypeError) as e:
                raise MalformedEventError(f"Notification record is missing {e}") from e

            if not isinstance(bucket, str) or not bucket or not isinstance(raw_key, str) or not raw_key:
                raise MalformedEventError("Notification bucket name and object key must be non-empty strings")

            created.append((bucket, self.namespace.decode_event_key(raw_key)))

        recorded = []
        for bucket, key in created:
            record = self.record(bucket, key)
            if record is not None:
                recorded.append(record)

        return recorded
