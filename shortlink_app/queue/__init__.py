"""
Log queue module.
Implements Strategy Pattern for flexible queue backends.
"""

from .strategies import QueueStrategy, RedisStreamQueue, InMemoryQueue
from .factory import QueueFactory, QueueBackend

__all__ = [
    "QueueStrategy",
    "RedisStreamQueue",
    "InMemoryQueue",
    "QueueFactory",
    "QueueBackend",
]
