"""
Order schemas package
"""

from .order import (
    CreateOrderRequest,
    OrderBase,
    OrderResponse,
    UpdateOrderStatusRequest,
)

__all__ = [
    "OrderBase",
    "CreateOrderRequest",
    "OrderResponse",
    "UpdateOrderStatusRequest",
]
