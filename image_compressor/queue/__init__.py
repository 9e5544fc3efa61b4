"""
Delay queue implementations.
"""
from .base import DelayQueue, QueueMessage, epoch_ms
from .memory_queue import MemoryDelayQueue
from .redis_queue import RedisDelayQueue

__all__ = [
    'DelayQueue',
    'QueueMessage',
    'epoch_ms',
    'MemoryDelayQueue',
    'RedisDelayQueue',
]
