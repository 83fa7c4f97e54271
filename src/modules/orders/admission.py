"""Admission limiter: per-client request-rate governance.

A fixed-window counter: the first request from an identity opens a
window of ``ORDER_RATE_WINDOW_SECONDS``; the first ``limit`` requests
inside it are admitted and the rest are denied until it lapses.  A burst
straddling two windows can therefore admit up to twice the limit.  That
bound is accepted; a stricter policy belongs behind ``AdmissionStore``.

Denials advertise the full window as ``Retry-After``.  The cache API has
no portable way to read a key's remaining TTL (LocMemCache exposes
none), so the header is an upper bound: a client that waits that long
is always admitted again.
"""

from __future__ import annotations

from typing import Optional

import structlog
from django.conf import settings
from django.http import HttpRequest

from modules.orders.exceptions import AdmissionDenied
from modules.orders.stores import AdmissionStore, CacheAdmissionStore

logger = structlog.get_logger(__name__)

UNKNOWN_IDENTITY = "unknown"


def client_identity(request: HttpRequest) -> str:
    """Derive the rate-limit identity of the caller.

    Uses the first hop of ``X-Forwarded-For`` (the original client as
    reported by the edge proxy), falling back to the direct peer address.
    """
    forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR", "")
    first_hop = forwarded_for.split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.META.get("REMOTE_ADDR") or UNKNOWN_IDENTITY


class AdmissionLimiter:
    """Decides whether a request from an identity may proceed."""

    def __init__(
        self,
        store: Optional[AdmissionStore] = None,
        limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
    ) -> None:
        self._store = store if store is not None else CacheAdmissionStore()
        self.limit = limit if limit is not None else settings.ORDER_RATE_LIMIT
        self.window_seconds = (
            window_seconds
            if window_seconds is not None
            else settings.ORDER_RATE_WINDOW_SECONDS
        )

    def admit(self, identity: str, limit: Optional[int] = None) -> bool:
        """Count this request and return whether it is within the limit."""
        limit = self.limit if limit is None else limit
        count = self._store.hit(identity, self.window_seconds)
        if count > limit:
            logger.warning(
                "order.admission_denied",
                identity=identity,
                count=count,
                limit=limit,
                window_seconds=self.window_seconds,
            )
            return False
        return True

    def check(self, identity: str) -> None:
        """Like :meth:`admit`, but raise ``AdmissionDenied`` on denial."""
        if not self.admit(identity):
            raise AdmissionDenied(identity, retry_after=self.window_seconds)
