# condo_core/health/checks.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict

from django.db import DatabaseError, connection

logger = logging.getLogger(__name__)


def check_database() -> Dict[str, Any]:
    started = time.perf_counter()
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as exc:
        logger.error("Health check: database unreachable: %s", exc)
        return {"status": "error", "error": str(exc)}
    return {"status": "ok", "latency_ms": round((time.perf_counter() - started) * 1000, 2)}
