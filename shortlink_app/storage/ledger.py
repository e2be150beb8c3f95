"""
Click ledger: shortcode -> ordered click history.

Append-only, in process memory. A sequence is seeded when its shortcode is
allocated and is kept after the link expires.
"""

import threading
from typing import Dict, List, Tuple

from shortlink_app.models.click import ClickEvent


class ClickLedger:
    """
    In-memory click history store.

    A single lock serializes appends, so one shortcode's events keep the
    order in which their redirects were accepted. Readers get tuple
    snapshots: later appends never show up in a previously returned result.
    """

    def __init__(self):
        self._clicks: Dict[str, List[ClickEvent]] = {}
        self._lock = threading.RLock()

    def seed(self, shortcode: str) -> None:
        """Create an empty history for a newly allocated shortcode"""
        with self._lock:
            self._clicks.setdefault(shortcode, [])

    def record_click(self, shortcode: str, event: ClickEvent) -> None:
        """
        Append a click event.

        The caller is expected to have resolved the shortcode through the
        registry first; an unseeded shortcode gets a new sequence.
        """
        with self._lock:
            self._clicks.setdefault(shortcode, []).append(event)

    def get_clicks(self, shortcode: str) -> Tuple[ClickEvent, ...]:
        """Full history in append order (empty for unknown shortcodes)"""
        with self._lock:
            return tuple(self._clicks.get(shortcode, ()))

    def count(self, shortcode: str) -> int:
        with self._lock:
            return len(self._clicks.get(shortcode, ()))

    def __contains__(self, shortcode: str) -> bool:
        with self._lock:
            return shortcode in self._clicks
