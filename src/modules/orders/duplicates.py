"""Duplicate suppressor: coarse idempotency for order submissions.

Guards against double-clicks and retried requests.  Two submissions are
equivalent when they share the same phone number (ignoring spaces,
hyphens and ``+``) and the exact same product name.  A deliberate repeat
order placed after the suppression window is accepted again.
"""

from __future__ import annotations

import re
from typing import Optional

import structlog
from django.conf import settings

from modules.orders.stores import CacheDuplicateStore, DuplicateStore

logger = structlog.get_logger(__name__)

_PHONE_NOISE_RE = re.compile(r"[\s\-+]")


def fingerprint(phone: str, product_name: str) -> str:
    """Derive the deduplication key of an order."""
    return f"{_PHONE_NOISE_RE.sub('', phone)}:{product_name}"


class DuplicateSuppressor:
    """Check-and-mark fingerprints over a ``DuplicateStore``."""

    def __init__(
        self,
        store: Optional[DuplicateStore] = None,
        window_seconds: Optional[int] = None,
    ) -> None:
        self._store = store if store is not None else CacheDuplicateStore()
        self.window_seconds = (
            window_seconds
            if window_seconds is not None
            else settings.ORDER_DUPLICATE_WINDOW_SECONDS
        )

    def is_duplicate(self, phone: str, product_name: str) -> bool:
        """Return ``True`` if an equivalent order was seen within the window.

        A first-seen fingerprint is recorded by the same call.
        """
        first_seen = self._store.add(
            fingerprint(phone, product_name), self.window_seconds
        )
        if not first_seen:
            logger.info("order.duplicate_detected", product_name=product_name)
        return not first_seen

    def mark_as_processed(self, phone: str, product_name: str) -> None:
        """Record a fingerprint without checking it."""
        self._store.mark(fingerprint(phone, product_name), self.window_seconds)
