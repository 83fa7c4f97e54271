import time
from typing import Any, Dict

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


def _order_storage_status() -> Dict[str, Any]:
    alias = settings.ORDERS_DATABASE_ALIAS
    if not alias:
        # Orders are acknowledged without being recorded; not a failure.
        return {"status": "unconfigured"}

    start = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except Exception:
        logger.exception("health.database_down", alias=alias)
        return {"status": "down"}
    return {"status": "up", "response_time_ms": _elapsed_ms(start)}


def _cache_status() -> Dict[str, Any]:
    start = time.monotonic()
    try:
        cache.set("_health_check", "ok", 10)
        if cache.get("_health_check") != "ok":
            raise ConnectionError("Cache read failed")
    except Exception:
        logger.exception("health.cache_down")
        return {"status": "down"}
    return {"status": "up", "response_time_ms": _elapsed_ms(start)}


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: order storage and cache reachability."""
    services = {
        "database": _order_storage_status(),
        "cache": _cache_status(),
    }
    healthy = all(service["status"] != "down" for service in services.values())
    overall = "healthy" if healthy else "unhealthy"

    logger.info("health.checked", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
