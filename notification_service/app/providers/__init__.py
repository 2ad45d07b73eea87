from .notification_provider import DispatchResult, SimulatedNotificationProvider

__all__ = [
    "DispatchResult",
    "SimulatedNotificationProvider",
]
