"""
Queue strategies using Strategy Pattern.
Allows switching between different queue backends (In-Memory, Redis Streams)
for log events waiting to be shipped to the remote log service.
"""

from abc import ABC, abstractmethod
from typing import List, Dict
import json
import socket
from collections import deque
from shortlink_app.log_client.models import LogEvent


class QueueStrategy(ABC):
    """
    Abstract base class for queue strategies.

    Request handlers publish, the log worker consumes. Publishing must be
    cheap: it sits on the request path.
    """

    @abstractmethod
    async def publish(self, queue_name: str, message: LogEvent) -> bool:
        """
        Publish a message to the queue.

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def consume(
        self,
        queue_name: str,
        batch_size: int = 1,
        block_time: int = 0
    ) -> List[LogEvent]:
        """
        Consume messages from the queue.

        Args:
            queue_name: Name of the queue
            batch_size: Maximum number of messages to retrieve
            block_time: Time to wait for messages (milliseconds, 0 = don't wait)

        Returns:
            List of LogEvent messages (oldest first)
        """
        pass

    @abstractmethod
    async def ack(self, queue_name: str, message_ids: List[str]) -> bool:
        """Acknowledge messages (mark as processed)"""
        pass

    @abstractmethod
    async def get_queue_length(self, queue_name: str) -> int:
        """Number of pending messages in queue"""
        pass

    async def consume_batch(self, queue_name: str, batch_size: int = 50, block_time: int = 0) -> List[LogEvent]:
        """Consume a batch of messages (consume with a larger default batch size)"""
        return await self.consume(queue_name, batch_size, block_time)


class RedisStreamQueue(QueueStrategy):
    """
    Redis Streams implementation for the log queue.

    Lets a separate worker process (python -m shortlink_app.log_processor.log_worker)
    ship logs for the API process.

    How it works:
    1. Producer publishes messages using XADD
    2. Consumer reads messages using XREADGROUP
    3. Consumer acknowledges messages using XACK
    """

    def __init__(self, redis_client, consumer_group: str = "log_workers"):
        """
        Args:
            redis_client: Redis client instance
            consumer_group: Name of consumer group for workers
        """
        self.redis = redis_client
        self.consumer_group = consumer_group
        self.consumer_name = f"worker-{socket.gethostname()}-{id(self)}"
        self._initialized_streams = set()

    async def _ensure_stream_exists(self, queue_name: str):
        """Create stream and consumer group if they don't exist"""
        if queue_name in self._initialized_streams:
            return

        try:
            self.redis.xgroup_create(
                name=queue_name,
                groupname=self.consumer_group,
                id='0',
                mkstream=True
            )
            print(f"✅ Created Redis stream: {queue_name}")
        except Exception as e:
            # Group might already exist, that's OK
            if "BUSYGROUP" not in str(e):
                print(f"⚠️  Stream creation warning: {e}")

        self._initialized_streams.add(queue_name)

    async def publish(self, queue_name: str, message: LogEvent) -> bool:
        """Append message to the stream (XADD)"""
        try:
            await self._ensure_stream_exists(queue_name)
            self.redis.xadd(queue_name, {'data': message.model_dump_json()})
            return True

        except Exception as e:
            print(f"❌ Redis publish error: {e}")
            return False

    async def consume(
        self,
        queue_name: str,
        batch_size: int = 1,
        block_time: int = 0
    ) -> List[LogEvent]:
        """
        Read new messages for this consumer group (XREADGROUP).
        Messages stay pending until acknowledged.
        """
        try:
            await self._ensure_stream_exists(queue_name)

            # block=0 means "forever" to Redis; None means don't block
            messages = self.redis.xreadgroup(
                groupname=self.consumer_group,
                consumername=self.consumer_name,
                streams={queue_name: '>'},
                count=batch_size,
                block=block_time or None
            )

            if not messages:
                return []

            events = []
            for stream_name, stream_messages in messages:
                for message_id, message_data in stream_messages:
                    if isinstance(message_id, bytes):
                        message_id = message_id.decode('utf-8')
                    try:
                        data = json.loads(message_data[b'data'].decode('utf-8'))
                        event = LogEvent(**data)
                        event.message_id = message_id
                        events.append(event)
                    except Exception as e:
                        print(f"⚠️  Failed to parse message {message_id}: {e}")

            return events

        except Exception as e:
            print(f"❌ Redis consume error: {e}")
            return []

    async def ack(self, queue_name: str, message_ids: List[str]) -> bool:
        """Remove messages from the pending list (XACK)"""
        try:
            if not message_ids:
                return True

            self.redis.xack(queue_name, self.consumer_group, *message_ids)
            return True

        except Exception as e:
            print(f"❌ Redis ack error: {e}")
            return False

    async def get_queue_length(self, queue_name: str) -> int:
        """Get approximate queue length"""
        try:
            info = self.redis.xinfo_stream(queue_name)
            return info['length']
        except Exception:
            return 0


class InMemoryQueue(QueueStrategy):
    """
    In-memory queue implementation using Python deque.

    Default backend: the API process runs the log worker as a background
    task, so both ends share this object. Not persistent; pending logs are
    lost on restart.
    """

    def __init__(self, maxlen: int = 10000):
        """
        Args:
            maxlen: Per-queue bound; the oldest entries are dropped when full
        """
        self.maxlen = maxlen
        self._queues: Dict[str, deque] = {}

    def _get_queue(self, queue_name: str) -> deque:
        """Get or create queue"""
        if queue_name not in self._queues:
            self._queues[queue_name] = deque(maxlen=self.maxlen)
        return self._queues[queue_name]

    async def publish(self, queue_name: str, message: LogEvent) -> bool:
        """Add message to in-memory queue"""
        self._get_queue(queue_name).append(message)
        return True

    async def consume(
        self,
        queue_name: str,
        batch_size: int = 1,
        block_time: int = 0
    ) -> List[LogEvent]:
        """
        Pop up to batch_size messages.

        Note: block_time is ignored (the worker sleeps between empty polls)
        """
        queue = self._get_queue(queue_name)
        messages = []

        while queue and len(messages) < batch_size:
            messages.append(queue.popleft())

        return messages

    async def ack(self, queue_name: str, message_ids: List[str]) -> bool:
        """Messages are removed on consume; nothing to acknowledge"""
        return True

    async def get_queue_length(self, queue_name: str) -> int:
        return len(self._get_queue(queue_name))
