"""
Tests for the in-memory code registry and click ledger.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from shortlink_app.exceptions import (
    ExpiredError,
    InvalidShortcodeError,
    InvalidUrlError,
    InvalidValidityError,
    NotFoundError,
    ShortcodeCollisionError,
)
from shortlink_app.models.click import ClickEvent
from shortlink_app.services.short_code_strategies import Base62ShortCodeStrategy
from shortlink_app.storage.ledger import ClickLedger
from shortlink_app.storage.registry import CodeRegistry


class TestCodeRegistry:
    """Test allocation and resolution"""

    def test_round_trip(self, registry, clock):
        record = registry.allocate("https://example.com/a", 15)

        resolved = registry.resolve(record.shortcode)
        assert resolved == record
        assert resolved.original_url == "https://example.com/a"
        assert resolved.created_at == clock.now
        assert resolved.expires_at == resolved.created_at + timedelta(minutes=15)

    def test_default_validity(self, registry):
        record = registry.allocate("https://example.com")
        assert record.validity_minutes == 30
        assert record.expires_at - record.created_at == timedelta(minutes=30)

    def test_fractional_validity(self, registry):
        record = registry.allocate("https://example.com", 1.5)
        assert record.expires_at - record.created_at == timedelta(seconds=90)

    def test_generated_code_format(self, registry):
        record = registry.allocate("https://example.com")
        assert len(record.shortcode) == 6
        assert record.shortcode.isalnum()

    def test_empty_shortcode_means_generated(self, registry):
        record = registry.allocate("https://example.com", shortcode="")
        assert len(record.shortcode) == 6

    def test_expiry_boundary(self, registry):
        record = registry.allocate("https://example.com", 1)

        assert registry.resolve(record.shortcode, now=record.expires_at - timedelta(milliseconds=1)) == record
        assert registry.resolve(record.shortcode, now=record.expires_at) == record
        with pytest.raises(ExpiredError):
            registry.resolve(record.shortcode, now=record.expires_at + timedelta(milliseconds=1))

    def test_expiry_follows_clock(self, registry, clock):
        record = registry.allocate("https://example.com", 1)
        clock.advance(seconds=61)

        with pytest.raises(ExpiredError):
            registry.resolve(record.shortcode)
        # Expired records are still known
        assert record.shortcode in registry

    def test_unknown_code(self, registry):
        with pytest.raises(NotFoundError):
            registry.resolve("doesnotexist")
        assert registry.get("doesnotexist") is None

    def test_collision_rejection(self, registry):
        first = registry.allocate("https://one.example", 10, "abc")

        with pytest.raises(ShortcodeCollisionError):
            registry.allocate("https://two.example", 10, "abc")

        assert registry.resolve("abc") == first
        assert len(registry) == 1

    def test_expired_code_still_collides(self, registry, clock):
        registry.allocate("https://one.example", 1, "abc")
        clock.advance(minutes=5)

        with pytest.raises(ShortcodeCollisionError):
            registry.allocate("https://two.example", 1, "abc")

    @pytest.mark.parametrize("url", [None, "", "not-a-valid-url", "example.com", 42])
    def test_invalid_url(self, registry, url):
        with pytest.raises(InvalidUrlError):
            registry.allocate(url)
        assert len(registry) == 0

    @pytest.mark.parametrize("validity", [0, -1, -0.5, "30", True, [5], float("nan")])
    def test_invalid_validity(self, registry, validity):
        with pytest.raises(InvalidValidityError):
            registry.allocate("https://example.com", validity)

    @pytest.mark.parametrize("validity", [1e10, float("inf"), 10 ** 20])
    def test_validity_past_representable_dates(self, registry, validity):
        """Expiry beyond the datetime range is bad input, not a crash"""
        with pytest.raises(InvalidValidityError):
            registry.allocate("https://example.com", validity, "huge")

        assert len(registry) == 0
        assert registry.allocate("https://example.com", 5, "huge").shortcode == "huge"

    def test_allocate_with_explicit_now(self, registry, clock):
        stamp = clock.now - timedelta(hours=3)
        record = registry.allocate("https://example.com", 10, now=stamp)

        assert record.created_at == stamp
        assert record.expires_at == stamp + timedelta(minutes=10)

    def test_is_expired_needs_a_reference_time(self, registry):
        record = registry.allocate("https://example.com", 1)

        assert not record.is_expired(record.expires_at)
        assert record.is_expired(record.expires_at + timedelta(microseconds=1))
        with pytest.raises(TypeError):
            record.is_expired()

    def test_shortcode_format_unconstrained_by_default(self, registry):
        record = registry.allocate("https://example.com", shortcode="a-b")
        assert record.shortcode == "a-b"

    @pytest.mark.parametrize("shortcode", ["ab", "a" * 21, "with-dash", "health", "shorturls"])
    def test_strict_shortcode_format(self, ledger, clock, shortcode):
        strict = CodeRegistry(ledger=ledger, clock=clock, strict_shortcode_format=True)

        with pytest.raises(InvalidShortcodeError):
            strict.allocate("https://example.com", shortcode=shortcode)

        assert strict.allocate("https://example.com", shortcode="abc123").shortcode == "abc123"

    def test_allocation_seeds_ledger(self, registry, ledger):
        record = registry.allocate("https://example.com")
        assert record.shortcode in ledger
        assert ledger.get_clicks(record.shortcode) == ()

    def test_records_are_immutable(self, registry):
        record = registry.allocate("https://example.com")
        with pytest.raises(Exception):
            record.original_url = "https://evil.example"

    def test_unique_ids(self, registry):
        ids = {registry.allocate("https://example.com").id for _ in range(50)}
        assert len(ids) == 50

    def test_base62_strategy_skips_requested_codes(self, ledger, clock):
        strategy = Base62ShortCodeStrategy(salt=0, length=3)
        registry = CodeRegistry(ledger=ledger, strategy=strategy, clock=clock)

        # The explicit allocation uses sequence 0; sequence 1 encodes to the taken "001"
        registry.allocate("https://one.example", shortcode="001")
        generated = registry.allocate("https://two.example")

        assert generated.shortcode == "002"
        assert len(registry) == 2


class TestRegistryConcurrency:
    """Uniqueness under concurrent allocation"""

    def test_same_requested_code_once(self, registry):
        workers = 16
        barrier = threading.Barrier(workers)

        def allocate(i):
            barrier.wait()
            try:
                registry.allocate(f"https://example.com/{i}", 5, "race")
                return "ok"
            except ShortcodeCollisionError:
                return "collision"

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(allocate, range(workers)))

        assert results.count("ok") == 1
        assert results.count("collision") == workers - 1
        assert len(registry) == 1

    def test_generated_codes_unique(self, ledger, clock):
        # Short codes make random collisions frequent
        from shortlink_app.services.short_code_strategies import RandomShortCodeStrategy
        registry = CodeRegistry(
            ledger=ledger,
            strategy=RandomShortCodeStrategy(length=3, max_retries=1000),
            clock=clock,
        )

        def allocate_many(_):
            return [registry.allocate("https://example.com").shortcode for _ in range(200)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            batches = list(pool.map(allocate_many, range(8)))

        codes = [code for batch in batches for code in batch]
        assert len(codes) == 1600
        assert len(set(codes)) == 1600
        assert len(registry) == 1600


class TestClickLedger:
    """Test click history storage"""

    def _event(self, clock, referrer="Direct"):
        return ClickEvent(timestamp=clock(), referrer=referrer, location="US")

    def test_accumulates_in_order(self, clock):
        ledger = ClickLedger()
        ledger.seed("abc")

        for i in range(5):
            clock.advance(seconds=1)
            ledger.record_click("abc", self._event(clock, referrer=f"https://ref{i}.example"))

        clicks = ledger.get_clicks("abc")
        assert len(clicks) == 5
        assert ledger.count("abc") == 5
        assert [c.referrer for c in clicks] == [f"https://ref{i}.example" for i in range(5)]

    def test_unknown_code_is_empty(self):
        ledger = ClickLedger()
        assert ledger.get_clicks("doesnotexist") == ()
        assert ledger.count("doesnotexist") == 0

    def test_snapshot_does_not_see_later_appends(self, clock):
        ledger = ClickLedger()
        ledger.seed("abc")
        ledger.record_click("abc", self._event(clock))

        snapshot = ledger.get_clicks("abc")
        ledger.record_click("abc", self._event(clock))

        assert len(snapshot) == 1
        assert len(ledger.get_clicks("abc")) == 2

    def test_seed_keeps_existing_history(self, clock):
        ledger = ClickLedger()
        ledger.record_click("abc", self._event(clock))
        ledger.seed("abc")
        assert ledger.count("abc") == 1

    def test_concurrent_appends(self, clock):
        ledger = ClickLedger()
        ledger.seed("abc")

        def click(_):
            for _ in range(250):
                ledger.record_click("abc", self._event(clock))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(click, range(8)))

        assert ledger.count("abc") == 2000
