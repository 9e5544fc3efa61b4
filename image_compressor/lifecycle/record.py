"""
Lifecycle record: the delay-queue note that an original was uploaded.

Wire format (queue message body)::

    {"bucket": "image-compressor", "key": "uploads/1700000000000.png", "createdAt": 1700000000000}
"""
import json
from dataclasses import dataclass
from typing import Any, Dict

from image_compressor.core.exceptions import MalformedRecordError


@dataclass(frozen=True)
class LifecycleRecord:
    """
    Immutable record of an object's creation time.

    ``created_at`` is epoch milliseconds and never changes once set.
    """
    bucket: str
    key: str
    created_at: int

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.created_at

    def to_dict(self) -> Dict[str, Any]:
        return {"bucket": self.bucket, "key": self.key, "createdAt": self.created_at}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, body: str) -> "LifecycleRecord":
        """
        Decode a queue message body.

        Raises:
            MalformedRecordError: body is not a valid record
        """
        try:
            payload = json.loads(body)
        except (TypeError, ValueError, RecursionError) as e:
            raise MalformedRecordError(f"Record body is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise MalformedRecordError("Record body must be a JSON object")

        bucket = payload.get("bucket")
        key = payload.get("key")
        created_at = payload.get("createdAt")

        if not isinstance(bucket, str) or not bucket:
            raise MalformedRecordError("Record is missing 'bucket'")
        if not isinstance(key, str) or not key:
            raise MalformedRecordError("Record is missing 'key'")
        # bool is an int subclass; true/false are not timestamps
        if isinstance(created_at, bool) or not isinstance(created_at, int):
            raise MalformedRecordError("Record 'createdAt' must be an integer epoch-millis value")
        if created_at < 0:
            raise MalformedRecordError("Record 'createdAt' cannot be negative")

        return cls(bucket=bucket, key=key, created_at=created_at)
