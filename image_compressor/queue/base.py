"""
Delay queue primitives shared by the Redis and in-process implementations.

The queue is used as a timer rather than for routing: a message stays
until it is explicitly deleted. ``receive`` hides claimed messages for
``visibility_timeout`` seconds (zero leaves them visible), so an
unacknowledged message is simply seen again by the next consumer.
"""
import time
from dataclasses import dataclass
from typing import List, Protocol


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class QueueMessage:
    """A claimed message. ``receipt_handle`` is what ``delete`` expects."""
    message_id: str
    receipt_handle: str
    body: str


class DelayQueue(Protocol):
    """Operations the lifecycle recorder and retention sweeper rely on."""

    name: str

    def send(self, body: str, delay_seconds: int = 0) -> str:
        ...

    def receive(self, max_messages: int = 1, visibility_timeout: int = 0) -> List[QueueMessage]:
        ...

    def delete(self, receipt_handle: str) -> bool:
        ...

    def change_visibility(self, receipt_handle: str, visibility_timeout: int) -> bool:
        ...

    def approximate_size(self) -> int:
        ...
