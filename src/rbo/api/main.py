from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from rbo.api.error_handling import register_exception_handlers
from rbo.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from rbo.api.providers import order_store_backend, storage_backend, table_repository
from rbo.api.routes.analytics import router as analytics_router
from rbo.api.routes.health import router as health_router
from rbo.api.routes.metrics import router as metrics_router
from rbo.api.routes.orders import router as orders_router
from rbo.api.routes.tables import router as tables_router
from rbo.infrastructure.observability.logging_config import configure_logging
from rbo.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("rbo.api.access")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"],
)


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()
    if env in {"dev", "test"}:
        return ["*"]

    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _route_template(request: Request) -> str:
    # Label by template so order and table ids do not explode metric cardinality.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception:
            logger.exception(
                "request_error",
                extra={"method": request.method, "path": request.url.path},
            )
            raise
        finally:
            duration_seconds = time.perf_counter() - started
            route = _route_template(request)
            REQUEST_COUNT.labels(method=request.method, route=route, status_code=str(status_code)).inc()
            REQUEST_LATENCY.labels(method=request.method, route=route).observe(duration_seconds)
            logger.info(
                "request_complete",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "route": route,
                    "status_code": status_code,
                    "duration_ms": round(duration_seconds * 1000, 2),
                },
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The first registry read writes the seed floor plan into an empty store.
    table_count = len(table_repository().list_all())
    logger.info(
        "app_started",
        extra={
            "storage_backend": storage_backend(),
            "order_store_backend": order_store_backend(),
            "table_count": table_count,
        },
    )
    yield


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Restaurant Back Office", version="0.1.0", lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(tables_router)
    app.include_router(orders_router)
    app.include_router(analytics_router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
