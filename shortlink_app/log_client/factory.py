"""
Factory for creating log sink instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
from .auth import TokenProvider, build_credentials
from .sinks import LogSinkStrategy, HTTPLogSink, InMemoryLogSink, NullLogSink
from shortlink_app.config import settings


class LogSinkBackend(Enum):
    """Available log sink backends"""
    HTTP = "http"
    MEMORY = "memory"
    NULL = "null"


class LogSinkFactory:
    """
    Simple factory for creating log sink instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: LogSinkStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: LogSinkBackend) -> LogSinkStrategy:
        """Create or return cached log sink instance"""
        if cls._instance is not None:
            return cls._instance

        if backend == LogSinkBackend.HTTP:
            token_provider = TokenProvider(
                auth_url=settings.auth_api_url,
                credentials=build_credentials(settings),
                timeout=settings.auth_timeout
            )
            cls._instance = HTTPLogSink(
                url=settings.log_api_url,
                timeout=settings.log_timeout,
                token_provider=token_provider
            )
            print(f"✅ HTTP log sink initialized ({settings.log_api_url})")

        elif backend == LogSinkBackend.MEMORY:
            cls._instance = InMemoryLogSink()
            print("✅ In-memory log sink initialized")

        elif backend == LogSinkBackend.NULL:
            cls._instance = NullLogSink()
            print("✅ Null log sink initialized")

        else:
            raise ValueError(f"Unknown log sink backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
