from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rbo.api.middleware.request_id import get_request_id
from rbo.application.ports.storage import StorageUnavailableError
from rbo.application.use_cases.get_order import InvalidStatsPeriodError, OrderNotFoundError
from rbo.application.use_cases.order_stats import InvalidRecentOrdersLimitError
from rbo.application.use_cases.place_order import InvalidOrderError, TableNotFoundError
from rbo.application.use_cases.reserve_table import InvalidReservationError
from rbo.application.use_cases.table_registry import InvalidFloorError, InvalidTableStatusError
from rbo.application.use_cases.update_order_payment import InvalidPaymentStatusError
from rbo.domain.order.entities import InvalidOrderStatusError, OrderTransitionError

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": get_request_id(),
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    return _error_response(
        status_code=http_exc.status_code,
        code=_HTTP_ERROR_CODES.get(http_exc.status_code, "HTTP_ERROR"),
        message=message,
    )


async def _storage_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning(
        "storage_write_failed",
        extra={"method": request.method, "path": request.url.path, "error": str(exc)},
    )
    return _error_response(
        status_code=503,
        code="STORAGE_UNAVAILABLE",
        message="order and table storage is unavailable",
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    mappings: list[tuple[type[Exception], int, str]] = [
        (OrderNotFoundError, 404, "ORDER_NOT_FOUND"),
        (TableNotFoundError, 404, "TABLE_NOT_FOUND"),
        (InvalidOrderError, 400, "INVALID_ORDER"),
        (InvalidOrderStatusError, 400, "INVALID_ORDER_STATUS"),
        (InvalidPaymentStatusError, 400, "INVALID_PAYMENT_STATUS"),
        (InvalidTableStatusError, 400, "INVALID_TABLE_STATUS"),
        (InvalidFloorError, 400, "INVALID_FLOOR"),
        (InvalidReservationError, 400, "INVALID_RESERVATION"),
        (InvalidStatsPeriodError, 400, "INVALID_STATS_PERIOD"),
        (InvalidRecentOrdersLimitError, 400, "INVALID_RECENT_ORDERS_LIMIT"),
        (OrderTransitionError, 409, "INVALID_ORDER_TRANSITION"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StorageUnavailableError, _storage_unavailable_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
