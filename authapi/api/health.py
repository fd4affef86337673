"""Health endpoint.

/health answers 200 whenever the process can respond; the ``status``
field reports "degraded" when the storage backend does not answer a
ping.  A 503 here would make an orchestrator restart a healthy process
over a database outage it cannot fix.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict:
    store = getattr(request.app.state, "store", None)
    checks: dict[str, str] = {}
    overall = "ok"

    if store is None:
        checks["database"] = "not_configured"
    else:
        try:
            await store.ping()
            checks["database"] = "ok"
        except Exception as exc:
            logger.warning("Health check: %s ping failed: %s", store.driver, type(exc).__name__)
            checks["database"] = "degraded"
            overall = "degraded"

    return {
        "status": overall,
        "driver": getattr(store, "driver", None),
        "checks": checks,
    }
