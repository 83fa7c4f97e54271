"""Tenant router: picks the order table from the request host.

Local and preview deployments write to ``test_orders`` so QA traffic never
reaches the sales team; every other host writes to ``orders``.  A missing
host header is routed to production (fail open) and logged.
"""

from __future__ import annotations

from typing import Iterable, Optional

import structlog
from django.conf import settings
from django.http.request import split_domain_port

from modules.orders.constants import PRODUCTION_TABLE, TEST_TABLE

logger = structlog.get_logger(__name__)

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "[::1]", "::1"})


def normalize_hostname(hostname: str) -> str:
    """Lower-case *hostname* and strip any port."""
    domain, _port = split_domain_port(hostname.strip().lower())
    return domain


def resolve_table(
    hostname: Optional[str],
    preview_suffixes: Optional[Iterable[str]] = None,
) -> str:
    """Return ``"test_orders"`` for local/preview hosts, else ``"orders"``."""
    if not hostname or not hostname.strip():
        logger.warning("tenant.hostname_missing", table=PRODUCTION_TABLE)
        return PRODUCTION_TABLE

    if preview_suffixes is None:
        preview_suffixes = settings.PREVIEW_HOST_SUFFIXES

    domain = normalize_hostname(hostname)
    if domain in LOCAL_HOSTS:
        return TEST_TABLE
    if any(
        suffix and domain.endswith(suffix.strip().lower())
        for suffix in preview_suffixes
    ):
        return TEST_TABLE
    return PRODUCTION_TABLE
