"""
Order Service application
=========================

Order write path over HTTP. Every created order is announced on the
order events queue; the queue being unavailable never fails a request.

Run with ``uvicorn order_service.app.main:app``.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.health import router as health_router
from .api.v1.orders import router as orders_router
from .core.database import get_database_manager
from .core.events import close_events, init_events
from .core.setting import get_settings
from .middleware.error import setup_order_error_handling
from .utils.logging import setup_order_logging

settings = get_settings()
enable_file_logging = settings.ENVIRONMENT.lower() in ["production", "staging"]

logger = setup_order_logging(
    "order_service",
    log_level=settings.LOG_LEVEL,
    enable_file_logging=enable_file_logging,
)


def _elapsed_ms(since: float) -> int:
    return int((time.time() - since) * 1000)


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_start = time.time()
    logger.info(
        "Starting order service",
        extra={
            "environment": settings.ENVIRONMENT,
            "service_version": settings.APP_VERSION,
            "queue": settings.ORDER_EVENTS_QUEUE,
        },
    )

    try:
        await get_database_manager().create_tables()
        # Never raises on an unreachable broker; publishing degrades instead
        await init_events(settings)
    except Exception as e:
        logger.error(
            "Failed to start order service",
            exc_info=True,
            extra={
                "startup_duration_ms": _elapsed_ms(startup_start),
                "error_type": type(e).__name__,
            },
        )
        raise

    logger.info(
        "Order service started",
        extra={"startup_duration_ms": _elapsed_ms(startup_start)},
    )

    yield

    shutdown_start = time.time()
    await close_events()
    await get_database_manager().close()
    logger.info(
        "Order service stopped",
        extra={"shutdown_duration_ms": _elapsed_ms(shutdown_start)},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Order management API; publishes order.created events for notification",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    setup_order_error_handling(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(orders_router, tags=["Orders"])

    return app


app = create_app()
