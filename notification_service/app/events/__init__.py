"""
Events module for the Notification Service.

Consumers:
    - BatchNotificationConsumer: folds a batch of queued messages into
      per-message outcomes and a "N succeeded, M failed" summary
    - OrderNotificationProcessor: parse, notify, mark the order NOTIFIED

Event Types Supported:
    order.created (consumed)
"""

from .consumers import BatchNotificationConsumer, BatchSummary, MessageOutcome
from .processor import OrderNotificationProcessor
from .schemas import OrderCreatedMessage, parse_message, parse_order_id

__all__ = [
    "BatchNotificationConsumer",
    "BatchSummary",
    "MessageOutcome",
    "OrderNotificationProcessor",
    "OrderCreatedMessage",
    "parse_message",
    "parse_order_id",
]
