"""
Log Delivery Worker

Consumes log events from the queue and delivers them to the log sink.

Architecture:
- Runs as a background task of the API process (in-memory queue), or as a
  standalone process when the queue is Redis Streams
- Delivery runs in a thread; the event loop never blocks on HTTP
- Best effort: a failed delivery is printed to the console and dropped,
  never retried
"""

import asyncio
import signal
import sys
from typing import List

from shortlink_app.config import settings
from shortlink_app.log_client.models import LogEvent
from shortlink_app.log_client.sinks import LogSinkStrategy
from shortlink_app.queue.strategies import QueueStrategy


class LogWorker:
    """
    Log delivery worker with batch consumption.

    Features:
    - Batch consumption from any QueueStrategy
    - Per-event delivery through a LogSinkStrategy
    - Console fallback for events that could not be delivered
    """

    def __init__(
        self,
        queue: QueueStrategy,
        sink: LogSinkStrategy,
        queue_name: str = "app_logs",
        batch_size: int = 50,
        block_time: int = 0,
        idle_sleep: float = 0.05,
    ):
        """
        Args:
            queue: Queue strategy for consuming messages
            sink: Where events are delivered
            queue_name: Queue/stream name
            batch_size: Max events per poll
            block_time: Passed to consume() (ms); keep 0 inside the API process
            idle_sleep: Seconds to wait after an empty poll
        """
        self.queue = queue
        self.sink = sink
        self.queue_name = queue_name
        self.batch_size = batch_size
        self.block_time = block_time
        self.idle_sleep = idle_sleep
        self.running = False
        self.delivered_count = 0
        self.failed_count = 0

    async def start(self, install_signal_handlers: bool = False):
        """Run until stop() is called, then drain what is left"""
        self.running = True
        print("🚀 Log Worker started")

        # signal.signal only works in the main thread
        if install_signal_handlers:
            signal.signal(signal.SIGINT, self._signal_handler)
            signal.signal(signal.SIGTERM, self._signal_handler)

        while self.running:
            try:
                processed = await self.process_once()
                if not processed:
                    await asyncio.sleep(self.idle_sleep)

            except asyncio.CancelledError:
                print("Worker task cancelled.")
                raise
            except Exception as e:
                print(f"❌ Error processing batch: {e}")
                await asyncio.sleep(1)

        await self.drain()
        print("🛑 Log Worker stopped")

    async def process_once(self) -> int:
        """
        Consume and deliver one batch.

        Returns:
            Number of events consumed
        """
        messages = await self.queue.consume_batch(
            queue_name=self.queue_name,
            batch_size=self.batch_size,
            block_time=self.block_time
        )

        if not messages:
            return 0

        await self._deliver_batch(messages)

        # Acknowledge even failed deliveries: there are no retries
        message_ids = [msg.message_id for msg in messages if msg.message_id]
        if message_ids:
            await self.queue.ack(self.queue_name, message_ids)

        return len(messages)

    async def drain(self):
        """Deliver everything still queued"""
        while await self.process_once():
            pass

    async def _deliver_batch(self, messages: List[LogEvent]):
        for event in messages:
            try:
                delivered = await asyncio.to_thread(self.sink.send, event)
            except Exception as e:
                print(f"[ASYNC LOGGING ERROR] {e}")
                delivered = False

            if delivered:
                self.delivered_count += 1
            else:
                self.failed_count += 1
                print(event.console_line())

    def _signal_handler(self, signum, frame):
        """Handle signals for graceful shutdown"""
        print(f"\nReceived signal {signum}. Shutting down gracefully...")
        self.stop()

    def stop(self):
        """Stop the worker"""
        self.running = False


async def main():
    """
    Standalone entry point, for the Redis Streams queue backend.

    Usage:
        python -m shortlink_app.log_processor.log_worker
    """
    print("=" * 60)
    print("🔧 Short Link Service - Log Worker")
    print("=" * 60)
    print(f"Environment: {settings.environment}")
    print(f"Queue backend: {settings.queue_backend}")
    print(f"Log sink backend: {settings.log_sink_backend}")
    print("=" * 60)

    from shortlink_app.queue.factory import QueueFactory, QueueBackend
    queue = QueueFactory.create(QueueBackend(settings.queue_backend))

    from shortlink_app.log_client.factory import LogSinkFactory, LogSinkBackend
    sink = LogSinkFactory.create(LogSinkBackend(settings.log_sink_backend))

    worker = LogWorker(
        queue=queue,
        sink=sink,
        queue_name=settings.queue_name,
        batch_size=settings.queue_batch_size,
        block_time=1000
    )

    try:
        await worker.start(install_signal_handlers=True)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
    except Exception as e:
        print(f"❌ Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
