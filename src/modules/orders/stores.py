"""Ephemeral state stores used by the intake pipeline.

``AdmissionStore`` and ``DuplicateStore`` are the contracts the admission
limiter and the duplicate suppressor depend on (DIP).  The concrete
implementations sit on Django's cache framework:

- The default aliases (``order_admission`` / ``order_duplicates``) are
  process-local ``LocMemCache`` instances: bounded, TTL-expiring and
  evicting the least-recently-used entry once ``MAX_ENTRIES`` is reached.
- Pointing ``ORDER_INTAKE_CACHE_URL`` at Redis swaps both aliases for
  ``django-redis`` caches, sharing the state between service instances
  without touching the pipeline.

Both check-then-mark operations map onto single atomic cache primitives
(``add`` / ``incr``), so racing requests for the same key never both win.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod

from django.core.cache import BaseCache, caches

ADMISSION_CACHE_ALIAS = "order_admission"
DUPLICATE_CACHE_ALIAS = "order_duplicates"


def cache_key(namespace: str, raw: str) -> str:
    """Hash *raw* into a cache key so client data never appears in keys."""
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class AdmissionStore(ABC):
    """Per-identity request counters with a fixed time-to-live."""

    @abstractmethod
    def hit(self, identity: str, window_seconds: int) -> int:
        """Count one request for *identity* and return the window total.

        The window starts with the first hit and is not extended by
        later hits; once it lapses the counter starts again from 1.
        """

    @abstractmethod
    def reset(self, identity: str) -> None:
        """Forget the counter for *identity*."""


class DuplicateStore(ABC):
    """Set of recently seen fingerprints with a fixed time-to-live."""

    @abstractmethod
    def add(self, fingerprint: str, ttl_seconds: int) -> bool:
        """Record *fingerprint*; return ``False`` if it was already present."""

    @abstractmethod
    def mark(self, fingerprint: str, ttl_seconds: int) -> None:
        """Record *fingerprint* unconditionally (restarting its TTL)."""


# ---------------------------------------------------------------------------
# Django cache implementations
# ---------------------------------------------------------------------------


class CacheAdmissionStore(AdmissionStore):
    """``AdmissionStore`` backed by a Django cache alias."""

    namespace = "admission"

    def __init__(self, cache: BaseCache | None = None) -> None:
        self._cache = cache if cache is not None else caches[ADMISSION_CACHE_ALIAS]

    def hit(self, identity: str, window_seconds: int) -> int:
        key = cache_key(self.namespace, identity)
        if self._cache.add(key, 1, timeout=window_seconds):
            return 1
        try:
            return self._cache.incr(key)
        except ValueError:
            # Window lapsed between add() and incr().
            self._cache.add(key, 1, timeout=window_seconds)
            return 1

    def reset(self, identity: str) -> None:
        self._cache.delete(cache_key(self.namespace, identity))


class CacheDuplicateStore(DuplicateStore):
    """``DuplicateStore`` backed by a Django cache alias."""

    namespace = "fingerprint"

    def __init__(self, cache: BaseCache | None = None) -> None:
        self._cache = cache if cache is not None else caches[DUPLICATE_CACHE_ALIAS]

    def add(self, fingerprint: str, ttl_seconds: int) -> bool:
        return self._cache.add(
            cache_key(self.namespace, fingerprint), True, timeout=ttl_seconds
        )

    def mark(self, fingerprint: str, ttl_seconds: int) -> None:
        self._cache.set(
            cache_key(self.namespace, fingerprint), True, timeout=ttl_seconds
        )
