"""
FastAPI dependency injection for Order Service

Provides database sessions, the order event publisher and the order service.
Event publishing lifecycle is handled by the core.events module.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db_session
from ..core.events import get_event_publisher
from ..events.producers import OrderEventPublisher
from ..services.order_service import OrderService

# =====================================================
# DATABASE DEPENDENCIES
# =====================================================


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""
    async for session in get_db_session():
        yield session


# =====================================================
# EVENT PUBLISHER DEPENDENCIES
# =====================================================


def get_order_event_publisher() -> Optional[OrderEventPublisher]:
    """Provide OrderEventPublisher instance"""
    return get_event_publisher()


# =====================================================
# SERVICE DEPENDENCIES
# =====================================================


def get_order_service(
    session: AsyncSession = Depends(get_async_session),
    event_publisher: Optional[OrderEventPublisher] = Depends(get_order_event_publisher),
) -> OrderService:
    """Provide OrderService instance with database and event publishing"""
    return OrderService(session, event_publisher)


# =====================================================
# REQUEST CONTEXT DEPENDENCIES
# =====================================================


def get_correlation_id(request: Request) -> Optional[str]:
    """Extract correlation ID from request headers or state"""
    correlation_id = (
        request.headers.get("X-Correlation-ID")
        or request.headers.get("correlation-id")
        or request.headers.get("x-request-id")
    )

    if not correlation_id:
        correlation_id = getattr(request.state, "correlation_id", None)

    return correlation_id


# =====================================================
# COMMON DEPENDENCY ALIASES
# =====================================================

CorrelationIdDep = Depends(get_correlation_id)
DatabaseDep = Depends(get_async_session)
OrderServiceDep = Depends(get_order_service)
OrderEventPublisherDep = Depends(get_order_event_publisher)
