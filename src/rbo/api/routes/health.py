from __future__ import annotations

from fastapi import APIRouter, Response, status

from rbo.api.providers import order_store_backend, storage_backend
from rbo.infrastructure.cache.redis_client import ping_redis
from rbo.infrastructure.db.session import ping_database

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    checks: dict[str, bool] = {}
    if storage_backend() == "redis":
        checks["redis"] = ping_redis(timeout_seconds=1.0)
    if order_store_backend() == "sql":
        checks["postgres"] = ping_database(timeout_seconds=1.0)

    if all(checks.values()):
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
