import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.core.config import get_settings

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Liveness probe. Returns 503 while the process is draining."""
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(
            status_code=503,
            content={"status": "shutting_down", "service": "startup-detective"},
        )
    return {"status": "healthy", "service": "startup-detective"}


@router.get("/ready")
async def readiness_check():
    """Readiness probe. Checks Redis only when snapshot persistence is on."""
    checks: dict[str, bool] = {}

    if get_settings().persist_snapshots:
        checks["redis"] = False
        try:
            from app.db.redis import get_redis

            await get_redis().ping()
            checks["redis"] = True
        except Exception as e:
            logger.error("redis_health_check_failed", error=str(e))

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": "ready" if all_healthy else "degraded", "checks": checks},
    )
