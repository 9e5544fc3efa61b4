"""
Redis-backed delay queue.

Layout (``<prefix>`` defaults to ``image_compressor:queue:<name>``):
- ``<prefix>:messages`` hash   message id -> body
- ``<prefix>:visible``  zset   message id -> epoch-ms the message becomes visible

Claiming is a single Lua script so two consumers never interleave between
reading the visible set and pushing the visibility deadline forward. With a
zero visibility timeout the deadline stays at ``now`` and the message is
immediately claimable again, which is exactly what the sweep relies on.
"""
import logging
import uuid
from typing import Callable, List

import redis

from image_compressor.core.exceptions import QueueUnavailableError
from image_compressor.queue.base import QueueMessage, epoch_ms

logger = logging.getLogger(__name__)

# KEYS[1] visible zset, KEYS[2] messages hash
# ARGV[1] now ms, ARGV[2] max messages, ARGV[3] new visible-at ms
_CLAIM_SCRIPT = """
local ids = redis.call('ZRANGEBYSCORE', KEYS[1], '-inf', ARGV[1], 'LIMIT', 0, tonumber(ARGV[2]))
local claimed = {}
for _, id in ipairs(ids) do
    local body = redis.call('HGET', KEYS[2], id)
    if body then
        redis.call('ZADD', KEYS[1], 'XX', ARGV[3], id)
        table.insert(claimed, id)
        table.insert(claimed, body)
    else
        redis.call('ZREM', KEYS[1], id)
    end
end
return claimed
"""


class RedisDelayQueue:
    """Durable delay queue stored in Redis."""

    def __init__(
        self,
        redis_client: redis.Redis,
        name: str,
        key_prefix: str = "image_compressor:queue",
        clock: Callable[[], int] = epoch_ms
    ):
        """
        Args:
            redis_client: Redis client (``decode_responses=True``)
            name: Queue name
            key_prefix: Namespace for the queue's Redis keys
            clock: Returns the current time in epoch milliseconds
        """
        self.redis = redis_client
        self.name = name
        self.clock = clock
        self.messages_key = f"{key_prefix}:{name}:messages"
        self.visible_key = f"{key_prefix}:{name}:visible"
        self._claim = self.redis.register_script(_CLAIM_SCRIPT)

    def send(self, body: str, delay_seconds: int = 0) -> str:
        message_id = uuid.uuid4().hex
        visible_at = self.clock() + delay_seconds * 1000

        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.hset(self.messages_key, message_id, body)
            pipe.zadd(self.visible_key, {message_id: visible_at})
            pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Failed to send message to queue '{self.name}': {e}")
            raise QueueUnavailableError(f"Queue '{self.name}' unavailable: {e}") from e

        logger.debug(f"Queued message {message_id} on '{self.name}'")
        return message_id

    def receive(self, max_messages: int = 1, visibility_timeout: int = 0) -> List[QueueMessage]:
        now = self.clock()

        try:
            raw = self._claim(
                keys=[self.visible_key, self.messages_key],
                args=[now, max_messages, now + visibility_timeout * 1000],
            )
        except redis.RedisError as e:
            logger.error(f"Failed to receive from queue '{self.name}': {e}")
            raise QueueUnavailableError(f"Queue '{self.name}' unavailable: {e}") from e

        messages = []
        for message_id, body in zip(raw[0::2], raw[1::2]):
            messages.append(QueueMessage(message_id=message_id, receipt_handle=message_id, body=body))
        return messages

    def delete(self, receipt_handle: str) -> bool:
        """Remove a message. Returns False if it was already gone."""
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.hdel(self.messages_key, receipt_handle)
            pipe.zrem(self.visible_key, receipt_handle)
            removed, _ = pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Failed to delete message {receipt_handle} from '{self.name}': {e}")
            raise QueueUnavailableError(f"Queue '{self.name}' unavailable: {e}") from e

        return bool(removed)

    def change_visibility(self, receipt_handle: str, visibility_timeout: int) -> bool:
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.zscore(self.visible_key, receipt_handle)
            pipe.zadd(
                self.visible_key,
                {receipt_handle: self.clock() + visibility_timeout * 1000},
                xx=True,
            )
            previous_score, _ = pipe.execute()
        except redis.RedisError as e:
            raise QueueUnavailableError(f"Queue '{self.name}' unavailable: {e}") from e

        return previous_score is not None

    def approximate_size(self) -> int:
        try:
            return self.redis.hlen(self.messages_key)
        except redis.RedisError as e:
            raise QueueUnavailableError(f"Queue '{self.name}' unavailable: {e}") from e
