"""
Test configuration and fixtures for the short link service.
This centralizes all test setup, making individual tests clean.
"""

import os

# Never ship test logs to the remote service
os.environ["LOG_SINK_BACKEND"] = "memory"
os.environ["QUEUE_BACKEND"] = "memory"

from datetime import datetime, timedelta, timezone

import random
import pytest
from fastapi.testclient import TestClient

from main import app
from shortlink_app.dependencies import (
    get_app_logger,
    get_clock,
    get_ledger,
    get_location_resolver,
    get_registry,
)
from shortlink_app.log_client.logger import AppLogger
from shortlink_app.queue.strategies import InMemoryQueue
from shortlink_app.services.location import StaticLocationResolver
from shortlink_app.services.short_code_strategies import RandomShortCodeStrategy
from shortlink_app.services.url_service import URLService
from shortlink_app.storage.ledger import ClickLedger
from shortlink_app.storage.registry import CodeRegistry

TEST_QUEUE = "test_logs"


class FrozenClock:
    """Clock that only moves when told to"""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def ledger():
    return ClickLedger()


@pytest.fixture
def registry(ledger, clock):
    """Fresh registry per test, sharing the test ledger and clock"""
    return CodeRegistry(
        ledger=ledger,
        strategy=RandomShortCodeStrategy(length=6, max_retries=10, rng=random.Random(42)),
        clock=clock,
    )


@pytest.fixture
def log_queue():
    return InMemoryQueue()


@pytest.fixture
def app_logger(log_queue):
    return AppLogger(queue=log_queue, queue_name=TEST_QUEUE, stack="backend")


@pytest.fixture
def location_resolver():
    return StaticLocationResolver("US")


@pytest.fixture
def url_service(registry, ledger, app_logger, clock, location_resolver):
    return URLService(
        registry=registry,
        ledger=ledger,
        logger=app_logger,
        clock=clock,
        location_resolver=location_resolver,
    )


@pytest.fixture
def logged_messages(log_queue):
    """Messages queued so far on the test log queue"""
    def _messages():
        return [event.message for event in log_queue._get_queue(TEST_QUEUE)]
    return _messages


@pytest.fixture(scope="function")
def client(registry, ledger, app_logger, clock, location_resolver):
    """
    Create a test client with isolated stores, a frozen clock and a
    queue-backed logger. This is the main fixture that tests will use.
    """
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_app_logger] = lambda: app_logger
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_location_resolver] = lambda: location_resolver

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
