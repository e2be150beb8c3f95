"""
Code registry: shortcode -> ShortUrlRecord.

Owns allocation (explicit or generated codes), URL/validity validation and
the NotFound / Expired lookup contract.
"""

import threading
import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional, Union

from shortlink_app.exceptions import (
    InvalidUrlError,
    InvalidValidityError,
    InvalidShortcodeError,
    ShortcodeCollisionError,
    NotFoundError,
    ExpiredError,
)
from shortlink_app.models.url import ShortUrlRecord
from shortlink_app.services.short_code_strategies import ShortCodeStrategy, RandomShortCodeStrategy
from shortlink_app.storage.ledger import ClickLedger
from shortlink_app.utils.clock import Clock, utc_now
from shortlink_app.utils.validators import is_valid_url, is_positive_number, is_valid_shortcode


class CodeRegistry:
    """
    In-memory registry of short URLs.

    Allocation runs entirely under one lock: collision check, code
    generation, insert and ledger seeding. Two concurrent requests for the
    same code therefore get exactly one success, and a generated code is
    never committed twice.

    Records are immutable and never removed; expiry is evaluated on read.
    """

    def __init__(
        self,
        ledger: Optional[ClickLedger] = None,
        strategy: Optional[ShortCodeStrategy] = None,
        clock: Clock = utc_now,
        default_validity_minutes: int = 30,
        strict_shortcode_format: bool = False,
    ):
        """
        Args:
            ledger: Click ledger seeded with an empty history on allocation
            strategy: Short code generator (random 6-char codes if omitted)
            clock: Zero-arg callable returning an aware datetime
            default_validity_minutes: Used when allocate() gets no validity
            strict_shortcode_format: Enforce 3-20 alphanumeric requested codes
        """
        self.ledger = ledger
        self.strategy = strategy or RandomShortCodeStrategy()
        self.clock = clock
        self.default_validity_minutes = default_validity_minutes
        self.strict_shortcode_format = strict_shortcode_format
        self._records: Dict[str, ShortUrlRecord] = {}
        self._sequence = 0
        self._lock = threading.RLock()

    def allocate(
        self,
        original_url: str,
        validity_minutes: Optional[Union[int, float]] = None,
        shortcode: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ShortUrlRecord:
        """
        Register a new short URL.

        created_at is `now` when given, otherwise the registry clock.

        Raises:
            InvalidUrlError: URL missing or not absolute
            InvalidValidityError: validity given but not a positive number,
                or too large to express as an expiry timestamp
            InvalidShortcodeError: strict mode and malformed/reserved code
            ShortcodeCollisionError: requested code already registered
            ShortcodeExhaustedError: generator found no free code
        """
        if not original_url:
            raise InvalidUrlError("URL is required")
        if not is_valid_url(original_url):
            raise InvalidUrlError()

        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes
        elif not is_positive_number(validity_minutes):
            raise InvalidValidityError()

        if self.strict_shortcode_format and shortcode and not is_valid_shortcode(shortcode):
            raise InvalidShortcodeError()

        created_at = now or self.clock()
        try:
            expires_at = created_at + timedelta(minutes=validity_minutes)
        except (OverflowError, ValueError):
            raise InvalidValidityError()

        with self._lock:
            if shortcode:
                if shortcode in self._records:
                    raise ShortcodeCollisionError()
                final_shortcode = shortcode
            else:
                final_shortcode = self.strategy.generate(self._sequence, self._is_taken)
            self._sequence += 1

            record = ShortUrlRecord(
                id=str(uuid.uuid4()),
                original_url=original_url,
                shortcode=final_shortcode,
                created_at=created_at,
                expires_at=expires_at,
                validity_minutes=validity_minutes,
            )

            self._records[final_shortcode] = record
            if self.ledger is not None:
                self.ledger.seed(final_shortcode)

        return record

    def resolve(self, shortcode: str, now: Optional[datetime] = None) -> ShortUrlRecord:
        """
        Look up an active record.

        Raises:
            NotFoundError: shortcode was never allocated
            ExpiredError: now is past the record's expires_at
        """
        record = self.get(shortcode)
        if record is None:
            raise NotFoundError()
        if record.is_expired(now or self.clock()):
            raise ExpiredError()
        return record

    def get(self, shortcode: str) -> Optional[ShortUrlRecord]:
        """Record regardless of expiry, or None"""
        with self._lock:
            return self._records.get(shortcode)

    def _is_taken(self, shortcode: str) -> bool:
        return shortcode in self._records

    def __contains__(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
