from .order_status_client import OrderStatusClient

__all__ = ["OrderStatusClient"]
