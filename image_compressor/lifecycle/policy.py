"""
Age-based retention policy.
"""
from dataclasses import dataclass
from typing import Any, Dict

from image_compressor.lifecycle.record import LifecycleRecord

ONE_HOUR_MS = 60 * 60 * 1000


@dataclass(frozen=True)
class RetentionPolicy:
    """
    Retention policy configuration

    An original becomes eligible for deletion once its age reaches
    ``threshold_ms`` (inclusive).
    """
    threshold_ms: int = ONE_HOUR_MS
    name: str = "delete-uploaded-originals"
    description: str = "Delete uploaded originals one hour after upload"

    def __post_init__(self):
        if self.threshold_ms <= 0:
            raise ValueError("Retention threshold must be positive")

    @classmethod
    def from_seconds(cls, seconds: int) -> "RetentionPolicy":
        return cls(
            threshold_ms=seconds * 1000,
            description=f"Delete uploaded originals {seconds}s after upload",
        )

    def is_due(self, record: LifecycleRecord, now_ms: int) -> bool:
        return record.age_ms(now_ms) >= self.threshold_ms

    def due_at(self, record: LifecycleRecord) -> int:
        """Epoch ms at which ``record`` becomes eligible for deletion."""
        return record.created_at + self.threshold_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "threshold_ms": self.threshold_ms,
            "description": self.description,
        }
