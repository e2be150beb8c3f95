"""
Fire-and-forget application logger.

log() validates the call and puts a LogEvent on the log queue; a background
LogWorker delivers it. Nothing here raises into the caller and nothing
waits on the network.
"""

from shortlink_app.log_client.models import LogEvent, LogValidationError


class AppLogger:
    """
    Structured logger for the remote log service.

    Args:
        queue: QueueStrategy the worker consumes from
        queue_name: Queue/stream name
        stack: Default stack for the level shortcuts (info, warn, ...)
    """

    def __init__(self, queue, queue_name: str = "app_logs", stack: str = "backend"):
        self.queue = queue
        self.queue_name = queue_name
        self.stack = stack

    async def log(self, stack: str, level: str, package: str, message: str) -> bool:
        """
        Enqueue a log event.

        Returns:
            True if the event was queued, False if it was rejected or dropped
        """
        try:
            event = LogEvent.build(stack, level, package, message)
        except LogValidationError as e:
            print(f"[LOGGING ERROR] {e}")
            return False

        try:
            return await self.queue.publish(self.queue_name, event)
        except Exception as e:
            print(f"[LOGGING ERROR] {e}")
            print(event.console_line())
            return False

    async def debug(self, package: str, message: str) -> bool:
        return await self.log(self.stack, "debug", package, message)

    async def info(self, package: str, message: str) -> bool:
        return await self.log(self.stack, "info", package, message)

    async def warn(self, package: str, message: str) -> bool:
        return await self.log(self.stack, "warn", package, message)

    async def error(self, package: str, message: str) -> bool:
        return await self.log(self.stack, "error", package, message)

    async def fatal(self, package: str, message: str) -> bool:
        return await self.log(self.stack, "fatal", package, message)
