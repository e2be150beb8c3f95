"""
Domain models for the short link service.

Records and click events live in process memory (see shortlink_app.storage);
there is no database behind them.
"""

from .url import ShortUrlRecord
from .click import ClickEvent, DIRECT_REFERRER

__all__ = ["ShortUrlRecord", "ClickEvent", "DIRECT_REFERRER"]
