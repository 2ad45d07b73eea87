"""
Events module for the Order Service.

Producers:
    - OrderEventPublisher: publishes order.created snapshots to the
      notification queue on a best-effort basis

Event Types Supported:
    order.created
"""

from .producers import BaseEventPublisher, OrderEventPublisher, PublishResult
from .schemas import ORDER_CREATED, OrderCreatedEvent

__all__ = [
    "BaseEventPublisher",
    "OrderEventPublisher",
    "PublishResult",
    "OrderCreatedEvent",
    "ORDER_CREATED",
]
