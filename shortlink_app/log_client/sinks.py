"""
Log sink strategies using Strategy Pattern.

A sink is where the log worker delivers events:
- HTTP: the remote evaluation log service (production)
- Memory: keeps events in a list (tests, local development)
- Null: drops everything
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from shortlink_app.log_client.auth import TokenProvider
from shortlink_app.log_client.models import LogEvent


class LogSinkStrategy(ABC):
    """
    Abstract base class for log sinks.

    send() is blocking; the worker runs it in a thread so the event loop
    serving requests never waits on it.
    """

    @abstractmethod
    def send(self, event: LogEvent) -> bool:
        """
        Deliver one event.

        Returns:
            True if delivered, False otherwise
        """
        pass


class HTTPLogSink(LogSinkStrategy):
    """POSTs events as JSON to the remote log endpoint"""

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        token_provider: Optional[TokenProvider] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.token_provider = token_provider
        self.session = session or requests.Session()

    def send(self, event: LogEvent) -> bool:
        headers = {"Content-Type": "application/json"}
        token = self.token_provider.get_token() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.session.post(
                self.url,
                json=event.to_payload(),
                headers=headers,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            print(f"❌ Log delivery error: {e}")
            return False

        if response.status_code == 401 and self.token_provider:
            self.token_provider.invalidate()

        return response.ok


class InMemoryLogSink(LogSinkStrategy):
    """Collects delivered events"""

    def __init__(self):
        self.events: List[LogEvent] = []

    def send(self, event: LogEvent) -> bool:
        self.events.append(event)
        return True


class NullLogSink(LogSinkStrategy):
    def send(self, event: LogEvent) -> bool:
        return True
