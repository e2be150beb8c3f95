from typing import Optional, Union

from shortlink_app.exceptions import ShortenerError, ExpiredError, NotFoundError, ShortcodeCollisionError
from shortlink_app.log_client.logger import AppLogger
from shortlink_app.models.click import ClickEvent, DIRECT_REFERRER
from shortlink_app.models.url import ShortUrlRecord
from shortlink_app.schemas.url import URLStats
from shortlink_app.services.location import LocationResolver, HashLocationResolver
from shortlink_app.storage.ledger import ClickLedger
from shortlink_app.storage.registry import CodeRegistry
from shortlink_app.utils.clock import Clock, utc_now


class URLService:
    """
    URL Service with dependency injection for storage, clock and logging.

    Orchestrates the three request flows:
    - create: registry allocation (which seeds the ledger)
    - redirect: resolve, record a click, hand back the destination
    - stats: resolve, read the click history

    Domain errors propagate to the caller after being logged; the API
    layer turns them into HTTP responses.
    """

    def __init__(
        self,
        registry: CodeRegistry,
        ledger: ClickLedger,
        logger: AppLogger,
        clock: Clock = utc_now,
        location_resolver: Optional[LocationResolver] = None,
        stats_allow_expired: bool = False,
    ):
        """
        Args:
            registry: Code registry (shortcode -> record)
            ledger: Click ledger (shortcode -> click events)
            logger: Fire-and-forget remote logger
            clock: Zero-arg callable returning an aware datetime
            location_resolver: Maps client addresses to region tags
            stats_allow_expired: Serve stats for expired links instead of 410
        """
        self.registry = registry
        self.ledger = ledger
        self.logger = logger
        self.clock = clock
        self.location_resolver = location_resolver or HashLocationResolver()
        self.stats_allow_expired = stats_allow_expired

    async def create_short_url(
        self,
        url: Optional[str],
        validity: Optional[Union[int, float]] = None,
        shortcode: Optional[str] = None,
    ) -> ShortUrlRecord:
        """Allocate a short URL; validity is in minutes (default from the registry)"""
        try:
            record = self.registry.allocate(url, validity, shortcode, now=self.clock())
        except ShortcodeCollisionError as e:
            await self._log_failure("POST /shorturls", e, shortcode)
            raise
        except ShortenerError as e:
            await self._log_failure("POST /shorturls", e, url or shortcode)
            raise

        await self.logger.info(
            "service", f"URL shortened successfully: {record.original_url} -> {record.shortcode}"
        )
        return record

    async def redirect(
        self,
        shortcode: str,
        referrer: Optional[str] = None,
        client_address: Optional[str] = None,
    ) -> str:
        """
        Resolve a shortcode for redirection and record the click.

        Returns:
            The destination URL

        A failure while recording the click is logged and does not stop
        the redirect.
        """
        now = self.clock()
        try:
            record = self.registry.resolve(shortcode, now)
        except ShortenerError as e:
            await self._log_failure(f"GET /{shortcode}", e)
            raise

        try:
            event = ClickEvent(
                timestamp=now,
                referrer=referrer or DIRECT_REFERRER,
                location=self.location_resolver.resolve(client_address),
            )
            self.ledger.record_click(shortcode, event)
        except Exception as e:
            await self.logger.error("service", f"Failed to record click for {shortcode}: {e}")

        await self.logger.info("service", f"URL accessed: {shortcode} -> {record.original_url}")
        return record.original_url

    async def get_stats(self, shortcode: str) -> URLStats:
        """Record metadata plus the full click history"""
        try:
            record = self._resolve_for_stats(shortcode)
        except ShortenerError as e:
            await self._log_failure(f"GET /shorturls/{shortcode}", e)
            raise

        clicks = self.ledger.get_clicks(shortcode)

        await self.logger.info("service", f"Statistics retrieved for shortcode: {shortcode}")

        return URLStats(
            shortcode=record.shortcode,
            original_url=record.original_url,
            created_at=record.created_at,
            expires_at=record.expires_at,
            total_clicks=len(clicks),
            clicks=list(clicks),
        )

    def _resolve_for_stats(self, shortcode: str) -> ShortUrlRecord:
        try:
            return self.registry.resolve(shortcode, self.clock())
        except ExpiredError:
            if not self.stats_allow_expired:
                raise
        record = self.registry.get(shortcode)
        if record is None:
            raise NotFoundError()
        return record

    async def _log_failure(self, operation: str, error: ShortenerError, detail: Optional[str] = None):
        """Client errors are warnings; internal failures are errors"""
        message = f"{operation}: {error.message}"
        if detail:
            message = f"{message}: {detail}"

        if error.status_code >= 500:
            await self.logger.error("handler", message)
        else:
            await self.logger.warn("handler", message)
