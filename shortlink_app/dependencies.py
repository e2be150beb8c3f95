"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the registry, ledger, log queue
and logger that are injected into services and routes.

Tests replace any of these through app.dependency_overrides to get
isolated stores, a fixed clock or a recording logger.
"""

from functools import lru_cache

from fastapi import Depends

from shortlink_app.config import settings
from shortlink_app.log_client.factory import LogSinkFactory, LogSinkBackend
from shortlink_app.log_client.logger import AppLogger
from shortlink_app.log_client.sinks import LogSinkStrategy
from shortlink_app.queue.factory import QueueFactory, QueueBackend
from shortlink_app.queue.strategies import QueueStrategy
from shortlink_app.services.location import LocationResolver, create_location_resolver
from shortlink_app.services.short_code_factory import ShortCodeFactory
from shortlink_app.storage.ledger import ClickLedger
from shortlink_app.storage.registry import CodeRegistry
from shortlink_app.utils.clock import Clock, utc_now


def get_clock() -> Clock:
    return utc_now


@lru_cache()
def get_ledger() -> ClickLedger:
    """Process-wide click ledger (singleton)"""
    return ClickLedger()


@lru_cache()
def get_registry() -> CodeRegistry:
    """
    Process-wide code registry (singleton), wired to the shared ledger
    so allocation seeds click histories. Requests going through
    URLService stamp records with the service clock, so overriding
    get_clock alone is enough to move created_at.
    """
    return CodeRegistry(
        ledger=get_ledger(),
        strategy=ShortCodeFactory.create_strategy(),
        clock=get_clock(),
        default_validity_minutes=settings.default_validity_minutes,
        strict_shortcode_format=settings.strict_shortcode_format,
    )


@lru_cache()
def get_location_resolver() -> LocationResolver:
    return create_location_resolver(settings.location_resolver, settings.static_location)


@lru_cache()
def get_log_queue() -> QueueStrategy:
    """
    Get log queue instance (singleton).

    Factory gets config from settings internally.
    """
    return QueueFactory.create(QueueBackend(settings.queue_backend))


@lru_cache()
def get_log_sink() -> LogSinkStrategy:
    return LogSinkFactory.create(LogSinkBackend(settings.log_sink_backend))


@lru_cache()
def get_app_logger() -> AppLogger:
    return AppLogger(
        queue=get_log_queue(),
        queue_name=settings.queue_name,
        stack=settings.log_stack
    )


def get_url_service(
    registry: CodeRegistry = Depends(get_registry),
    ledger: ClickLedger = Depends(get_ledger),
    logger: AppLogger = Depends(get_app_logger),
    clock: Clock = Depends(get_clock),
    location_resolver: LocationResolver = Depends(get_location_resolver),
):
    """
    Get URLService with all dependencies injected.

    Controller depends on service; service depends on the stores,
    the clock and the logger.
    """
    from shortlink_app.services.url_service import URLService
    return URLService(
        registry=registry,
        ledger=ledger,
        logger=logger,
        clock=clock,
        location_resolver=location_resolver,
        stats_allow_expired=settings.stats_allow_expired,
    )
