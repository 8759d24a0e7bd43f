import time
from typing import Any, Callable, Dict, Tuple

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger()

HEALTH_CACHE_KEY = "_kart_health_check"


def _ping_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _ping_cache() -> None:
    cache.set(HEALTH_CACHE_KEY, "ok", 10)
    if cache.get(HEALTH_CACHE_KEY) != "ok":
        raise ConnectionError("Cache read failed")


HEALTH_CHECKS: Tuple[Tuple[str, Callable[[], None]], ...] = (
    ("database", _ping_database),
    ("cache", _ping_cache),
)


def health_check(request: HttpRequest) -> JsonResponse:
    """Report liveness of the backing services (public, no API key)."""
    services: Dict[str, Dict[str, Any]] = {}

    for name, ping in HEALTH_CHECKS:
        start = time.monotonic()
        try:
            ping()
        except Exception:
            # Any failure marks the service down; the details go to the log.
            logger.exception("health_check_failure", service=name)
            services[name] = {"status": "down"}
            continue
        services[name] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }

    healthy = all(entry["status"] == "up" for entry in services.values())
    overall = "healthy" if healthy else "unhealthy"
    logger.info("health_check_completed", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
