"""Health & Readiness Probes — liveness plus database and media storage checks.

Invariants:
    - GET /health/ answers 200 while the process is up
    - GET /health/ready answers 503 only when the database is unreachable;
      an unwritable local upload directory reports storage as degraded
      (captures can still go to Vercel Blob)
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from boothboss.api.deps import get_app_settings, get_storage
from boothboss.config import Settings
from boothboss.infrastructure import database
from boothboss.infrastructure.storage import StorageRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "boothboss-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(
    storage: StorageRegistry = Depends(get_storage),
    app_settings: Settings = Depends(get_app_settings),
):
    manager = database.db_manager
    latency_ms = await manager.ping() if manager else None
    if latency_ms is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )

    local_ok = await storage.local.ensure_writable()
    if not local_ok:
        logger.warning("Local upload directory is not writable", extra={"provider": "local"})
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "storage": "healthy" if local_ok else "degraded",
            "blob_configured": bool(app_settings.blob_read_write_token),
        },
        "database_latency_ms": latency_ms,
    }
