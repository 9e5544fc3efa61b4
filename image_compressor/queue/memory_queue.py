"""
In-process delay queue.

Same semantics as RedisDelayQueue but nothing survives a restart. Used for
local development (``QUEUE_BACKEND=memory``) and as the substitute queue in
tests.
"""
import itertools
import threading
import uuid
from typing import Callable, Dict, List, Tuple

from image_compressor.queue.base import QueueMessage, epoch_ms


class MemoryDelayQueue:
    """Thread-safe delay queue held in a dict."""

    def __init__(self, name: str = "memory", clock: Callable[[], int] = epoch_ms):
        self.name = name
        self.clock = clock
        self._lock = threading.Lock()
        self._seq = itertools.count()
        # message id -> (visible_at ms, insertion order, body)
        self._messages: Dict[str, Tuple[int, int, str]] = {}

    def send(self, body: str, delay_seconds: int = 0) -> str:
        message_id = uuid.uuid4().hex
        with self._lock:
            self._messages[message_id] = (
                self.clock() + delay_seconds * 1000,
                next(self._seq),
                body,
            )
        return message_id

    def receive(self, max_messages: int = 1, visibility_timeout: int = 0) -> List[QueueMessage]:
        with self._lock:
            now = self.clock()
            visible = sorted(
                (entry[0], entry[1], message_id)
                for message_id, entry in self._messages.items()
                if entry[0] <= now
            )[:max_messages]

            claimed = []
            for _, seq, message_id in visible:
                body = self._messages[message_id][2]
                self._messages[message_id] = (now + visibility_timeout * 1000, seq, body)
                claimed.append(QueueMessage(message_id=message_id, receipt_handle=message_id, body=body))
            return claimed

    def delete(self, receipt_handle: str) -> bool:
        with self._lock:
            return self._messages.pop(receipt_handle, None) is not None

    def change_visibility(self, receipt_handle: str, visibility_timeout: int) -> bool:
        with self._lock:
            entry = self._messages.get(receipt_handle)
            if entry is None:
                return False
            self._messages[receipt_handle] = (self.clock() + visibility_timeout * 1000, entry[1], entry[2])
            return True

    def approximate_size(self) -> int:
        with self._lock:
            return len(self._messages)
