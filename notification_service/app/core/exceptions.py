"""
Notification Service error taxonomy.

Every error raised while processing one queued message derives from
``NotificationError`` so the batch consumer can record it as a failure for
that message alone.
"""

from typing import Optional


class NotificationError(Exception):
    """Base class for per-message processing failures"""

    retryable: bool = False


class MessageParseError(NotificationError):
    """Message body is not valid JSON or lacks a usable ``orderId``"""


class TransportError(NotificationError):
    """Network failure or timeout while calling the order service"""

    retryable = True

    def __init__(self, message: str, order_id: Optional[int] = None):
        super().__init__(message)
        self.order_id = order_id


class RemoteRejection(NotificationError):
    """Order service answered outside the 2xx range"""

    def __init__(self, status_code: int, body: str, order_id: Optional[int] = None):
        super().__init__(
            f"Order service rejected status update. Status: {status_code}, Body: {body}"
        )
        self.status_code = status_code
        self.body = body
        self.order_id = order_id
