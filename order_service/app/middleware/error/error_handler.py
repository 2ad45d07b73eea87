"""
Error handling for Order Service.

Every failure leaves the API as the same JSON envelope::

    {"error": {"type", "message", "correlation_id", "timestamp",
               "path", "method", "details"?}}

Order domain errors carry their own HTTP status and error type, so adding
a new one only requires a subclass of ``OrderServiceError``.
"""

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...core.exceptions import OrderServiceError
from ...utils.logging import setup_order_logging

logger = setup_order_logging("order_service_error_handler")


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or request.headers.get(
        "X-Correlation-ID", "unknown"
    )


class OrderServiceErrorHandler:
    """Maps exceptions raised while serving a request to error envelopes."""

    @staticmethod
    def setup_error_handlers(app: FastAPI) -> None:
        app.add_exception_handler(
            StarletteHTTPException, OrderServiceErrorHandler.handle_http_error
        )
        app.add_exception_handler(
            RequestValidationError, OrderServiceErrorHandler.handle_request_validation
        )
        app.add_exception_handler(
            OrderServiceError, OrderServiceErrorHandler.handle_order_error
        )
        app.add_exception_handler(Exception, OrderServiceErrorHandler.handle_unexpected)

    @staticmethod
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Routing errors (unknown path, wrong method) raised by Starlette."""
        return OrderServiceErrorHandler._create_error_response(
            request, exc.status_code, "http_error", str(exc.detail)
        )

    @staticmethod
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Body or path parameters that do not match the request schema."""
        validation_errors: List[Dict[str, Any]] = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        return OrderServiceErrorHandler._create_error_response(
            request,
            422,
            "request_validation_error",
            "Request validation failed",
            details={"validation_errors": validation_errors},
        )

    @staticmethod
    async def handle_order_error(
        request: Request, exc: OrderServiceError
    ) -> JSONResponse:
        details: Dict[str, Any] = {"exception_type": type(exc).__name__}
        if exc.order_id is not None:
            details["order_id"] = exc.order_id
        return OrderServiceErrorHandler._create_error_response(
            request, exc.status_code, exc.error_type, exc.message, details=details
        )

    @staticmethod
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        # The message of an unexpected error is logged but never returned
        logger.error(
            "Unhandled exception occurred",
            extra={
                "correlation_id": _correlation_id(request),
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc(),
                "event_type": "unhandled_exception",
            },
        )
        return OrderServiceErrorHandler._create_error_response(
            request,
            500,
            "internal_server_error",
            "An internal server error occurred",
            details={"exception_type": type(exc).__name__},
        )

    @staticmethod
    def _create_error_response(
        request: Request,
        status_code: int,
        error_type: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> JSONResponse:
        correlation_id = _correlation_id(request)
        error: Dict[str, Any] = {
            "type": error_type,
            "message": message,
            "correlation_id": correlation_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request.url.path,
            "method": request.method,
        }
        if details:
            error["details"] = details

        if status_code < 500:
            logger.warning(
                f"Client error: {error_type}",
                extra={
                    "correlation_id": correlation_id,
                    "status_code": status_code,
                    "error_type": error_type,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "client_error",
                },
            )

        return JSONResponse(status_code=status_code, content={"error": error})


def setup_order_error_handling(app: FastAPI) -> None:
    """Install the Order Service error handlers on ``app``."""
    OrderServiceErrorHandler.setup_error_handlers(app)
    logger.info(
        "Order Service error handling configured",
        extra={"event_type": "error_handler_setup"},
    )
