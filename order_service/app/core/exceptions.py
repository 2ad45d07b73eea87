"""
Order Service domain exceptions.

Raised by the service layer and translated to HTTP responses by
``middleware.error.error_handler``.
"""

from typing import Optional


class OrderServiceError(Exception):
    """Base class for order service business errors"""

    status_code: int = 400
    error_type: str = "order_error"

    def __init__(self, message: str, order_id: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.order_id = order_id


class OrderValidationError(OrderServiceError):
    """Caller supplied an invalid value (e.g. a blank status)"""

    status_code = 400
    error_type = "validation_error"


class OrderNotFoundError(OrderServiceError):
    """No order exists with the requested identifier"""

    status_code = 404
    error_type = "not_found"

    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found", order_id=order_id)
